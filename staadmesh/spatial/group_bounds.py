"""
Bounding rectangles of classified plate groups.

Used by the drawing layer to outline the moment and shear groups of each
pedestal on the plan.
"""

from typing import Dict, Iterable, List, Optional
from loguru import logger
import numpy as np

from staadmesh.core.models import (
    GroupBox,
    Node,
    PedestalGroupBoxes,
    PlateGroups,
    Plate,
)


def compute_bounding_box(
    plate_ids: Iterable[int],
    plates_by_id: Dict[int, Plate],
    nodes_by_id: Dict[int, Node],
) -> Optional[GroupBox]:
    """
    Compute the plan rectangle enclosing a set of plates.

    Args:
        plate_ids: Plate ids of one group
        plates_by_id: Plate lookup
        nodes_by_id: Node lookup

    Returns:
        GroupBox with plan X as x and plan Z as y, or None for an empty set
    """
    corners = [
        (nodes_by_id[node_id].x, nodes_by_id[node_id].z)
        for plate_id in plate_ids
        for node_id in plates_by_id[plate_id].nodes
    ]

    if not corners:
        return None

    points = np.asarray(corners, dtype=float)
    min_x, min_z = points.min(axis=0)
    max_x, max_z = points.max(axis=0)

    return GroupBox(
        x=float(min_x),
        y=float(min_z),
        width=float(max_x - min_x),
        height=float(max_z - min_z),
    )


def compute_group_boxes(
    groups: PlateGroups,
    plates: Iterable[Plate],
    nodes: Iterable[Node],
) -> List[PedestalGroupBoxes]:
    """
    Compute the three group rectangles of every pedestal.

    Args:
        groups: Classified groups with per-pedestal breakdown
        plates: All plates
        nodes: All nodes

    Returns:
        One PedestalGroupBoxes per pedestal, in classification order
    """
    plates_by_id = {p.id: p for p in plates}
    nodes_by_id = {n.id: n for n in nodes}

    boxes = []
    for pedestal_groups in groups.per_pedestal:
        boxes.append(
            PedestalGroupBoxes(
                pedestal_id=pedestal_groups.pedestal_id,
                moment=compute_bounding_box(pedestal_groups.moment, plates_by_id, nodes_by_id),
                one_way_shear=compute_bounding_box(
                    pedestal_groups.one_way_shear, plates_by_id, nodes_by_id
                ),
                two_way_shear=compute_bounding_box(
                    pedestal_groups.two_way_shear, plates_by_id, nodes_by_id
                ),
            )
        )

    logger.debug(f"Computed group boxes for {len(boxes)} pedestals")

    return boxes

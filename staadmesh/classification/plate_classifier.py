"""
Plate group classification around pedestal footprints.

Assigns plates to the MOMENT, 1_WAY_SHEAR and 2_WAY_SHEAR design groups of
every pedestal and unions the groups across pedestals.
"""

import math
from typing import Dict, Iterable, List, Set, Tuple
from loguru import logger

from staadmesh.core.geometry import find_closest_index, round_half_up
from staadmesh.core.models import (
    GridLines,
    Pedestal,
    PedestalGroups,
    PlateGroups,
)


IndexRange = Tuple[int, int]


def footprint_range(center_index: int, plate_span: int, expand: int = 0) -> IndexRange:
    """
    Half-open range of plate cell indices covered around a grid index.

    Args:
        center_index: Grid line index nearest to the pedestal center
        plate_span: Footprint size in plate cells
        expand: Extra cells added on both ends

    Returns:
        (start, end) before clipping
    """
    start = math.floor(center_index - plate_span / 2 - expand)
    end = math.ceil(center_index + plate_span / 2 + expand)
    return start, end


def clip_range(index_range: IndexRange, count: int) -> IndexRange:
    """Clip a half-open range to [0, count)."""
    start, end = index_range
    return max(0, start), min(count, end)


class PlateClassifier:
    """
    Classifies plates into design groups around each pedestal.

    Algorithm (per pedestal):
    1. Find the grid index nearest to the pedestal center on each axis
    2. Convert footprint length/width to plate counts (round(dim / mesh))
    3. MOMENT: cells under the footprint
    4. 1_WAY_SHEAR: footprint expanded by round(thickness / mesh) cells
    5. 2_WAY_SHEAR: footprint expanded by round(thickness / (2 * mesh)) cells
    All ranges are clipped to the plate grid before iterating.
    """

    def __init__(self, mesh: float, plate_thickness: float):
        """
        Initialize plate classifier.

        Args:
            mesh: Target mesh size (m)
            plate_thickness: Plate thickness (m), drives the shear bands
        """
        self.mesh = mesh
        self.plate_thickness = plate_thickness
        self.one_way_expand = round_half_up(plate_thickness / mesh)
        self.two_way_expand = round_half_up(plate_thickness / (2 * mesh))

    def classify(
        self,
        pedestals: Iterable[Pedestal],
        grid: GridLines,
        plate_ids_by_cell: Dict[Tuple[int, int], int],
    ) -> PlateGroups:
        """
        Classify plates for all pedestals.

        Args:
            pedestals: Pedestals to classify around
            grid: Grid lines the plates were built on
            plate_ids_by_cell: Map of (xi, zi) cell indices to plate id

        Returns:
            PlateGroups with unioned, sorted plate ids and per-pedestal groups
        """
        pedestals = list(pedestals)
        logger.info(
            f"Classifying plates around {len(pedestals)} pedestals "
            f"(1-way +{self.one_way_expand}, 2-way +{self.two_way_expand} cells)"
        )

        moment: Set[int] = set()
        one_way: Set[int] = set()
        two_way: Set[int] = set()
        per_pedestal: List[PedestalGroups] = []

        for pedestal in pedestals:
            groups = self.classify_pedestal(pedestal, grid, plate_ids_by_cell)
            per_pedestal.append(groups)

            moment.update(groups.moment)
            one_way.update(groups.one_way_shear)
            two_way.update(groups.two_way_shear)

        result = PlateGroups(
            moment=tuple(sorted(moment)),
            one_way_shear=tuple(sorted(one_way)),
            two_way_shear=tuple(sorted(two_way)),
            per_pedestal=tuple(per_pedestal),
        )

        logger.success(
            f"Classified plates: moment={len(result.moment)}, "
            f"1-way shear={len(result.one_way_shear)}, "
            f"2-way shear={len(result.two_way_shear)}"
        )

        return result

    def classify_pedestal(
        self,
        pedestal: Pedestal,
        grid: GridLines,
        plate_ids_by_cell: Dict[Tuple[int, int], int],
    ) -> PedestalGroups:
        """
        Classify plates around a single pedestal.

        Args:
            pedestal: Pedestal footprint
            grid: Grid lines
            plate_ids_by_cell: Map of (xi, zi) cell indices to plate id

        Returns:
            PedestalGroups (empty when the grid has no lines)
        """
        px_idx = find_closest_index(grid.x_lines, pedestal.x)
        pz_idx = find_closest_index(grid.z_lines, pedestal.z)

        if px_idx < 0 or pz_idx < 0:
            logger.debug(f"Pedestal {pedestal}: empty grid axis, no groups")
            return PedestalGroups(pedestal_id=pedestal.id)

        nx_plates, nz_plates = grid.plate_counts
        x_span = round_half_up(pedestal.length / self.mesh)
        z_span = round_half_up(pedestal.width / self.mesh)

        def collect(expand: int) -> Tuple[int, ...]:
            x_range = clip_range(footprint_range(px_idx, x_span, expand), nx_plates)
            z_range = clip_range(footprint_range(pz_idx, z_span, expand), nz_plates)
            return self._plates_in_ranges(x_range, z_range, plate_ids_by_cell)

        groups = PedestalGroups(
            pedestal_id=pedestal.id,
            moment=collect(0),
            one_way_shear=collect(self.one_way_expand),
            two_way_shear=collect(self.two_way_expand),
        )

        logger.debug(
            f"Pedestal {pedestal} at grid index ({px_idx}, {pz_idx}): "
            f"{len(groups.moment)}/{len(groups.one_way_shear)}/"
            f"{len(groups.two_way_shear)} plates"
        )

        return groups

    @staticmethod
    def _plates_in_ranges(
        x_range: IndexRange,
        z_range: IndexRange,
        plate_ids_by_cell: Dict[Tuple[int, int], int],
    ) -> Tuple[int, ...]:
        """Plate ids of all cells inside both (already clipped) ranges."""
        plate_ids = []
        for xi in range(*x_range):
            for zi in range(*z_range):
                plate_id = plate_ids_by_cell.get((xi, zi))
                if plate_id is not None:
                    plate_ids.append(plate_id)
        return tuple(sorted(plate_ids))


def classify_plates(
    pedestals: Iterable[Pedestal],
    grid: GridLines,
    plate_ids_by_cell: Dict[Tuple[int, int], int],
    mesh: float,
    plate_thickness: float,
) -> PlateGroups:
    """
    Convenience function to classify plates into design groups.

    Args:
        pedestals: Pedestals to classify around
        grid: Grid lines
        plate_ids_by_cell: Map of (xi, zi) cell indices to plate id
        mesh: Target mesh size (m)
        plate_thickness: Plate thickness (m)

    Returns:
        PlateGroups
    """
    classifier = PlateClassifier(mesh=mesh, plate_thickness=plate_thickness)

    return classifier.classify(pedestals, grid, plate_ids_by_cell)

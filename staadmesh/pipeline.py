"""
Full model computation from a plan snapshot.

compute_model() is the single recompute entry point: callers build a new
PlanSnapshot whenever any input changes and run the whole pipeline again.
"""

from loguru import logger

from staadmesh.core.models import PlanSnapshot, StructuralModel
from staadmesh.generation.grid_builder import build_grid_lines
from staadmesh.generation.mesh_generator import generate_mesh
from staadmesh.classification.plate_classifier import classify_plates
from staadmesh.spatial.group_bounds import compute_group_boxes


def compute_model(snapshot: PlanSnapshot) -> StructuralModel:
    """
    Run grid, mesh, classification and group box stages.

    Args:
        snapshot: Immutable plan, mesh and pedestal input

    Returns:
        StructuralModel ready for export
    """
    logger.info(
        f"Computing model: plan {snapshot.length}x{snapshot.width}, mesh {snapshot.mesh}, "
        f"{len(snapshot.pedestals)} pedestals"
    )

    grid = build_grid_lines(
        length=snapshot.length,
        width=snapshot.width,
        mesh=snapshot.mesh,
        pedestals=snapshot.pedestals,
    )

    mesh = generate_mesh(
        grid,
        pedestals=snapshot.pedestals,
        pedestal_height=snapshot.pedestal_height,
        orientation=snapshot.orientation,
    )

    groups = classify_plates(
        snapshot.pedestals,
        grid,
        mesh.plate_ids_by_cell,
        mesh=snapshot.mesh,
        plate_thickness=snapshot.plate_thickness,
    )

    group_boxes = compute_group_boxes(groups, mesh.plates, mesh.nodes)

    model = StructuralModel(
        snapshot=snapshot,
        grid=grid,
        nodes=mesh.nodes,
        plates=mesh.plates,
        members=mesh.members,
        groups=groups,
        group_boxes=tuple(group_boxes),
    )

    logger.success(f"Computed model: {model.summary()}")

    return model

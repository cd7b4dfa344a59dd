"""
staadmesh - Plate Mesh Generator for STAAD Workflows

Converts a rectangular plan with pedestal footprints into a shell plate model
and writes it as STAAD.Pro input.
"""

__version__ = "0.1.0"

from staadmesh.core.models import Pedestal, PlanSnapshot, StructuralModel
from staadmesh.generation.grid_builder import build_grid_lines
from staadmesh.generation.mesh_generator import generate_mesh
from staadmesh.generation.staad_generator import export_staad
from staadmesh.classification.plate_classifier import classify_plates
from staadmesh.spatial.group_bounds import compute_group_boxes
from staadmesh.pipeline import compute_model

__all__ = [
    "Pedestal",
    "PlanSnapshot",
    "StructuralModel",
    "build_grid_lines",
    "generate_mesh",
    "export_staad",
    "classify_plates",
    "compute_group_boxes",
    "compute_model",
]

"""
Core data models for staadmesh.

All models use Pydantic for validation and are frozen, so every stage of the
pipeline works on an immutable snapshot of its inputs.
"""

from enum import Enum
from typing import Dict, Iterable, List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


Orientation = Literal["up", "down"]


class NodeKind(str, Enum):
    """Kinds of mesh nodes."""
    SURFACE = "surface"
    PEDESTAL = "pedestal"


class GroupName(str, Enum):
    """Design groups written to the STAAD group definition."""
    MOMENT = "MOMENT"
    ONE_WAY_SHEAR = "1_WAY_SHEAR"
    TWO_WAY_SHEAR = "2_WAY_SHEAR"


class FrozenModel(BaseModel):
    """Base for immutable models."""
    model_config = ConfigDict(frozen=True)


class Pedestal(FrozenModel):
    """Rectangular pedestal footprint placed on the plan."""
    id: int = Field(ge=1)
    x: float
    z: float
    length: float = Field(gt=0.0)  # along X
    width: float = Field(gt=0.0)   # along Z

    def __str__(self) -> str:
        return f"P{self.id}({self.x:.3f}, {self.z:.3f}, {self.length:.3f}x{self.width:.3f})"


class PlanSnapshot(FrozenModel):
    """
    Complete input of one model computation.

    Replaces a mutable application store: the presentation layer builds a new
    snapshot whenever any input changes and runs the whole pipeline again.
    """
    length: float = Field(gt=0.0)  # plan extent along X (m)
    width: float = Field(gt=0.0)   # plan extent along Z (m)
    mesh: float = Field(gt=0.0)    # target plate size (m)
    pedestal_height: float = Field(default=0.0, ge=0.0)
    plate_thickness: float = Field(default=0.3, gt=0.0)
    orientation: Orientation = "down"
    pedestals: Tuple[Pedestal, ...] = ()

    @field_validator("pedestals", mode="before")
    @classmethod
    def validate_pedestals(cls, v):
        """Accept any iterable of pedestals and reject duplicate ids."""
        if isinstance(v, (str, bytes)) or not isinstance(v, Iterable):
            raise ValueError("Pedestals must be an iterable of pedestals")
        pedestals = tuple(v)
        ids = [
            p.id if isinstance(p, Pedestal) else p.get("id")
            for p in pedestals
            if isinstance(p, (Pedestal, dict))
        ]
        if len(ids) != len(set(ids)):
            raise ValueError("Pedestal ids must be unique")
        return pedestals

    @classmethod
    def from_config(cls, config=None, pedestals=()) -> "PlanSnapshot":
        """Build a snapshot from configured geometry defaults."""
        if config is None:
            from staadmesh.core.config import get_default_config
            config = get_default_config()

        return cls(
            length=config.get_geometry_default("length", 6.0),
            width=config.get_geometry_default("width", 4.0),
            mesh=config.get_geometry_default("mesh", 0.2),
            pedestal_height=config.get_geometry_default("pedestal_height", 0.0),
            plate_thickness=config.get_geometry_default("plate_thickness", 0.3),
            orientation=config.get_geometry_default("orientation", "down"),
            pedestals=tuple(pedestals),
        )


class GridLines(FrozenModel):
    """Sorted grid line coordinates along each plan axis."""
    x_lines: Tuple[float, ...]
    z_lines: Tuple[float, ...]

    @property
    def plate_counts(self) -> Tuple[int, int]:
        """Number of plate cells along X and Z."""
        return (max(len(self.x_lines) - 1, 0), max(len(self.z_lines) - 1, 0))

    def __str__(self) -> str:
        return f"GridLines({len(self.x_lines)}x{len(self.z_lines)})"


class Node(FrozenModel):
    """Mesh node (STAAD joint)."""
    id: int = Field(ge=1)
    x: float
    y: float
    z: float
    kind: NodeKind = NodeKind.SURFACE


class Plate(FrozenModel):
    """Four-noded shell element spanning one grid cell."""
    id: int = Field(ge=1)
    nodes: Tuple[int, int, int, int]


class Member(FrozenModel):
    """Vertical member from a surface node up to a pedestal node."""
    id: int = Field(ge=1)
    start_node: int
    end_node: int
    pedestal: Pedestal  # dimension source for the member property


class PedestalGroups(FrozenModel):
    """Plate ids classified around a single pedestal."""
    pedestal_id: int
    moment: Tuple[int, ...] = ()
    one_way_shear: Tuple[int, ...] = ()
    two_way_shear: Tuple[int, ...] = ()


class PlateGroups(FrozenModel):
    """Design groups unioned across all pedestals, sorted ascending."""
    moment: Tuple[int, ...] = ()
    one_way_shear: Tuple[int, ...] = ()
    two_way_shear: Tuple[int, ...] = ()
    per_pedestal: Tuple[PedestalGroups, ...] = ()

    def get(self, name: GroupName) -> Tuple[int, ...]:
        """Get plate ids of a group by its STAAD name."""
        return {
            GroupName.MOMENT: self.moment,
            GroupName.ONE_WAY_SHEAR: self.one_way_shear,
            GroupName.TWO_WAY_SHEAR: self.two_way_shear,
        }[GroupName(name)]

    def is_empty(self) -> bool:
        return not (self.moment or self.one_way_shear or self.two_way_shear)


class GroupBox(FrozenModel):
    """Axis-aligned rectangle in plan coordinates (plan Z maps to y)."""
    x: float
    y: float
    width: float
    height: float


class PedestalGroupBoxes(FrozenModel):
    """Visualization rectangles of the three groups of one pedestal."""
    pedestal_id: int
    moment: Optional[GroupBox] = None
    one_way_shear: Optional[GroupBox] = None
    two_way_shear: Optional[GroupBox] = None


class MeshResult(FrozenModel):
    """Output of the mesh synthesizer."""
    nodes: Tuple[Node, ...]
    plates: Tuple[Plate, ...]
    members: Tuple[Member, ...]
    plate_ids_by_cell: Dict[Tuple[int, int], int] = Field(default_factory=dict)


class StructuralModel(FrozenModel):
    """Everything one pipeline run produces."""
    snapshot: PlanSnapshot
    grid: GridLines
    nodes: Tuple[Node, ...]
    plates: Tuple[Plate, ...]
    members: Tuple[Member, ...]
    groups: PlateGroups
    group_boxes: Tuple[PedestalGroupBoxes, ...] = ()

    @property
    def surface_nodes(self) -> List[Node]:
        return [n for n in self.nodes if n.kind == NodeKind.SURFACE]

    @property
    def pedestal_nodes(self) -> List[Node]:
        return [n for n in self.nodes if n.kind == NodeKind.PEDESTAL]

    @property
    def last_plate_id(self) -> int:
        """Id of the last plate, 0 when there are no plates."""
        return self.plates[-1].id if self.plates else 0

    def summary(self) -> str:
        return (
            f"Nodes: {len(self.nodes)} · Plates: {len(self.plates)} · "
            f"Members: {len(self.members)}"
        )

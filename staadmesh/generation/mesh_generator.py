"""
Plate mesh generation from grid lines.

Creates surface nodes at every grid intersection, one shell plate per grid
cell and a vertical member for every pedestal that sits on a grid node.
"""

from typing import Dict, Iterable, List, Tuple
from loguru import logger

from staadmesh.core.geometry import coord_key
from staadmesh.core.models import (
    GridLines,
    MeshResult,
    Member,
    Node,
    NodeKind,
    Orientation,
    Pedestal,
    Plate,
)


# Pedestal heights at or below this produce no pedestal nodes
HEIGHT_EPSILON = 1e-9


def surface_node_id(xi: int, zi: int, nx: int) -> int:
    """Id of the surface node at grid indices (xi, zi), nx lines along X."""
    return zi * nx + xi + 1


class MeshGenerator:
    """
    Generates nodes, plates and pedestal members over a grid.

    Node ids are row-major (z outer, x inner) from 1. Pedestal nodes continue
    the counter after all surface nodes. Plate ids follow the same scan order.
    """

    def __init__(
        self,
        pedestal_height: float = 0.0,
        orientation: Orientation = "down",
    ):
        """
        Initialize mesh generator.

        Args:
            pedestal_height: Height of pedestal nodes above the surface (m)
            orientation: "down" keeps [tl, tr, br, bl] plate node order,
                         "up" reverses it to flip the face normal
        """
        self.pedestal_height = pedestal_height
        self.orientation = orientation

    def generate(
        self, grid: GridLines, pedestals: Iterable[Pedestal] = ()
    ) -> MeshResult:
        """
        Generate the mesh.

        Args:
            grid: Grid lines along X and Z
            pedestals: Pedestals to attach members to

        Returns:
            MeshResult with nodes, plates, members and the cell -> plate id map
        """
        pedestals = list(pedestals)
        logger.info(
            f"Generating mesh on {len(grid.x_lines)}x{len(grid.z_lines)} grid "
            f"(orientation={self.orientation})"
        )

        nodes, node_ids_by_coord = self._surface_nodes(grid)

        members: List[Member] = []
        if self.pedestal_height > HEIGHT_EPSILON:
            self._attach_pedestals(pedestals, node_ids_by_coord, nodes, members)

        plates, plate_ids_by_cell = self._plates(grid)

        if not plates:
            logger.warning("Grid has no cells, no plates generated")

        logger.success(
            f"Generated {len(nodes)} nodes, {len(plates)} plates, {len(members)} members"
        )

        return MeshResult(
            nodes=tuple(nodes),
            plates=tuple(plates),
            members=tuple(members),
            plate_ids_by_cell=plate_ids_by_cell,
        )

    def _surface_nodes(
        self, grid: GridLines
    ) -> Tuple[List[Node], Dict[Tuple[int, int], int]]:
        """Create surface nodes (y=0) and the rounded coordinate lookup."""
        nodes = []
        node_ids_by_coord = {}
        nx = len(grid.x_lines)

        for zi, z in enumerate(grid.z_lines):
            for xi, x in enumerate(grid.x_lines):
                node_id = surface_node_id(xi, zi, nx)
                nodes.append(Node(id=node_id, x=x, y=0.0, z=z, kind=NodeKind.SURFACE))
                node_ids_by_coord[coord_key(x, z)] = node_id

        return nodes, node_ids_by_coord

    def _attach_pedestals(
        self,
        pedestals: List[Pedestal],
        node_ids_by_coord: Dict[Tuple[int, int], int],
        nodes: List[Node],
        members: List[Member],
    ) -> None:
        """Add a pedestal node and member for each pedestal on a grid node."""
        for pedestal in pedestals:
            surface_id = node_ids_by_coord.get(coord_key(pedestal.x, pedestal.z))

            # STAAD needs the member to start on a meshed joint
            if surface_id is None:
                logger.debug(f"Pedestal {pedestal} is not on a grid node, no member")
                continue

            pedestal_node = Node(
                id=len(nodes) + 1,
                x=pedestal.x,
                y=self.pedestal_height,
                z=pedestal.z,
                kind=NodeKind.PEDESTAL,
            )
            nodes.append(pedestal_node)

            members.append(
                Member(
                    id=len(members) + 1,
                    start_node=surface_id,
                    end_node=pedestal_node.id,
                    pedestal=pedestal,
                )
            )

    def _plates(
        self, grid: GridLines
    ) -> Tuple[List[Plate], Dict[Tuple[int, int], int]]:
        """Create one plate per grid cell."""
        plates = []
        plate_ids_by_cell = {}
        nx = len(grid.x_lines)

        for zi in range(len(grid.z_lines) - 1):
            for xi in range(nx - 1):
                tl = surface_node_id(xi, zi, nx)
                tr = surface_node_id(xi + 1, zi, nx)
                br = surface_node_id(xi + 1, zi + 1, nx)
                bl = surface_node_id(xi, zi + 1, nx)

                if self.orientation == "up":
                    order = (bl, br, tr, tl)
                else:
                    order = (tl, tr, br, bl)

                plate_id = len(plates) + 1
                plates.append(Plate(id=plate_id, nodes=order))
                plate_ids_by_cell[(xi, zi)] = plate_id

        return plates, plate_ids_by_cell


def generate_mesh(
    grid: GridLines,
    pedestals: Iterable[Pedestal] = (),
    pedestal_height: float = 0.0,
    orientation: Orientation = "down",
) -> MeshResult:
    """
    Convenience function to generate the plate mesh.

    Args:
        grid: Grid lines
        pedestals: Pedestals to attach members to
        pedestal_height: Pedestal node elevation (m)
        orientation: Plate face orientation ("up" or "down")

    Returns:
        MeshResult
    """
    generator = MeshGenerator(pedestal_height=pedestal_height, orientation=orientation)

    return generator.generate(grid, pedestals)

"""
Grid line construction for the plate mesh.

Builds one sorted coordinate array per plan axis. Pedestal centers are forced
onto the grid as cut points, and each segment between cut points is divided
into mesh-sized strips with the remainder forming the last strip.
"""

import math
from functools import lru_cache
from typing import Iterable, List, Sequence, Tuple
from loguru import logger

from staadmesh.core.geometry import clamp, uniq_sorted
from staadmesh.core.models import GridLines, Pedestal


# Interior points closer than this to a cut point are dropped
SPAN_TOLERANCE = 1e-9


def divide_segments(cuts: Sequence[float], step: float) -> List[float]:
    """
    Add mesh divisions between consecutive cut points.

    Args:
        cuts: Sorted, deduplicated cut points
        step: Target mesh size

    Returns:
        Sorted list of cut points plus interior division points
    """
    lines = set(cuts)

    for a, b in zip(cuts, cuts[1:]):
        span = b - a
        if span <= 0:
            continue

        k = math.floor(span / step)
        for j in range(1, k + 1):
            t = a + j * step
            if a + SPAN_TOLERANCE < t < b - SPAN_TOLERANCE:
                lines.add(t)

    return sorted(lines)


@lru_cache(maxsize=64)
def _cached_grid(
    centers: Tuple[Tuple[float, float], ...],
    length: float,
    width: float,
    mesh: float,
) -> GridLines:
    x_cuts = uniq_sorted([0.0, length] + [clamp(x, 0.0, length) for x, _ in centers])
    z_cuts = uniq_sorted([0.0, width] + [clamp(z, 0.0, width) for _, z in centers])

    return GridLines(
        x_lines=tuple(divide_segments(x_cuts, mesh)),
        z_lines=tuple(divide_segments(z_cuts, mesh)),
    )


class GridBuilder:
    """
    Builds grid lines that respect pedestal positions.

    Algorithm:
    1. Seed each axis with 0, the plan extent and every clamped pedestal coordinate
    2. Snap seeds to 1e-6, deduplicate and sort
    3. Divide each seeded segment into mesh-sized strips (remainder last)

    Results are cached per (pedestal centers, length, width, mesh). The cache
    key is order-independent, so the grid never depends on pedestal order.
    """

    def __init__(self, length: float, width: float, mesh: float):
        """
        Initialize grid builder.

        Args:
            length: Plan extent along X (m)
            width: Plan extent along Z (m)
            mesh: Target mesh size (m)
        """
        self.length = length
        self.width = width
        self.mesh = mesh

    def build(self, pedestals: Iterable[Pedestal] = ()) -> GridLines:
        """
        Build grid lines for a set of pedestals.

        Args:
            pedestals: Pedestals whose centers become cut points

        Returns:
            GridLines with sorted x and z coordinates
        """
        pedestals = list(pedestals)
        logger.info(
            f"Building grid for {self.length}x{self.width} plan, "
            f"mesh {self.mesh}, {len(pedestals)} pedestals"
        )

        for pedestal in pedestals:
            if not (0.0 <= pedestal.x <= self.length and 0.0 <= pedestal.z <= self.width):
                logger.warning(f"Pedestal {pedestal} lies outside the plan, clamping cut point")

        centers = tuple(sorted({(p.x, p.z) for p in pedestals}))
        grid = _cached_grid(centers, self.length, self.width, self.mesh)

        logger.success(f"Built grid: {len(grid.x_lines)}x{len(grid.z_lines)} lines")

        return grid


def build_grid_lines(
    length: float,
    width: float,
    mesh: float,
    pedestals: Iterable[Pedestal] = (),
) -> GridLines:
    """
    Convenience function to build grid lines.

    Args:
        length: Plan extent along X (m)
        width: Plan extent along Z (m)
        mesh: Target mesh size (m)
        pedestals: Pedestals forced onto the grid

    Returns:
        GridLines
    """
    builder = GridBuilder(length=length, width=width, mesh=mesh)

    return builder.build(pedestals)

"""
Numeric helpers shared by the grid, mesh and export stages.

Rounding is half-up everywhere (not Python's round-half-even), so that a
value such as 2.5 plate cells always rounds to 3.
"""

import math
from typing import Iterable, List, Sequence, Tuple

import numpy as np


GRID_EPSILON = 1e-6


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return min(max(value, low), high)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +inf."""
    return int(math.floor(value + 0.5))


def round3(value: float) -> float:
    """Round to three decimal places (half-up)."""
    return math.floor(value * 1000 + 0.5) / 1000


def format_number(value: float) -> str:
    """
    Format a number rounded to 3 decimals in its shortest form.

    Examples: 6.0 -> "6", 0.30000000000000004 -> "0.3", -0.0 -> "0"
    """
    rounded = round3(value)
    if rounded.is_integer():
        return str(int(rounded))
    return repr(rounded)


def coord_key(x: float, z: float) -> Tuple[int, int]:
    """Exact lookup key of a plan point at millimetre resolution."""
    return (round_half_up(x * 1000), round_half_up(z * 1000))


def uniq_sorted(values: Iterable[float], eps: float = GRID_EPSILON) -> List[float]:
    """Snap values to multiples of eps, drop duplicates and sort."""
    return sorted({round_half_up(v / eps) * eps for v in values})


def find_closest_index(values: Sequence[float], target: float) -> int:
    """
    Index of the value closest to target, -1 for an empty sequence.

    Ties resolve to the first minimum.
    """
    if len(values) == 0:
        return -1
    return int(np.argmin(np.abs(np.asarray(values, dtype=float) - target)))

"""
Grid Geometry and Coordinate Mapping

Maps continuous positions onto a resolution^3 lattice spanning `bounds` on
every axis:

  cell_scale = (max - min) / (resolution - 1)
  index      = round((coord - min) / cell_scale)
  coord      = min + index * cell_scale

Cells are linearized as k * res^2 + j * res + i, which is the C-order
flattening of an array indexed [k, j, i].
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass


def _round_half_away(x):
    # Python's round() is banker's rounding; cell lookup rounds .5 up in magnitude
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


@dataclass(frozen=True)
class GridGeometry:
    """Resolution and physical extent of a cubic grid."""

    resolution: int
    bounds: tuple[float, float]

    def __post_init__(self) -> None:
        if not isinstance(self.resolution, numbers.Integral):
            raise ValueError(f"resolution must be an integer, got {self.resolution!r}")
        if self.resolution < 3:
            raise ValueError("resolution must be >= 3")
        object.__setattr__(self, "resolution", int(self.resolution))
        lo, hi = self.bounds
        if not lo < hi:
            raise ValueError("bounds must satisfy min < max")
        object.__setattr__(self, "bounds", (float(lo), float(hi)))

    @property
    def cell_scale(self) -> float:
        lo, hi = self.bounds
        return (hi - lo) / (self.resolution - 1)

    @property
    def shape(self) -> tuple[int, int, int]:
        return (self.resolution,) * 3

    @property
    def size(self) -> int:
        return self.resolution ** 3

    def contains(self, i, j, k) -> bool:
        r = self.resolution
        return 0 <= i < r and 0 <= j < r and 0 <= k < r

    def index_of(self, i, j, k) -> int:
        """Linear index of cell (i, j, k)."""
        if not self.contains(i, j, k):
            raise ValueError(f"cell {(i, j, k)} outside a {self.resolution}^3 grid")
        r = self.resolution
        return k * r * r + j * r + i

    def position_to_index(self, position) -> tuple[int, int, int] | None:
        """Nearest cell to a position, or None when it falls off the grid."""
        lo = self.bounds[0]
        scale = self.cell_scale
        scaled = [(c - lo) / scale for c in position]
        if len(scaled) != 3 or not all(math.isfinite(s) for s in scaled):
            return None
        cell = tuple(_round_half_away(s) for s in scaled)
        if not self.contains(*cell):
            return None
        return cell

    def index_to_position(self, i, j, k) -> tuple[float, float, float]:
        lo = self.bounds[0]
        scale = self.cell_scale
        return (lo + i * scale, lo + j * scale, lo + k * scale)

    def interior_range(self) -> tuple[int, int]:
        """Half-open index range [1, res - 1) of cells the stepper updates."""
        return 1, self.resolution - 1

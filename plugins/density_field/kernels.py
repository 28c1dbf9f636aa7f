"""
Deposit Kernels

A deposit adds `amplitude * weight` to every cell within the kernel's support
around the target cell. Kernels describe that support as integer offsets
(di, dj, dk) and matching weights, so the field applies every kernel through
the same loop.

Kernels are peak-normalized: the target cell always receives weight 1.
"""

from dataclasses import dataclass
from functools import cached_property

import numpy as np


@dataclass(frozen=True)
class GaussianKernel:
    """Gaussian falloff over a cube of +/- radius cells.

    weight(d) = exp(-d^2 / (2 * sigma^2)), d measured in cell units.
    """

    sigma: float = 1.5
    radius: int = 3

    def __post_init__(self):
        if self.sigma <= 0:
            raise ValueError("sigma must be > 0")
        if self.radius < 0:
            raise ValueError("radius must be >= 0")

    @cached_property
    def _table(self):
        r = self.radius
        span = np.arange(-r, r + 1)
        dk, dj, di = np.meshgrid(span, span, span, indexing="ij")
        offsets = np.stack([di.ravel(), dj.ravel(), dk.ravel()], axis=1)
        dist_sq = (offsets ** 2).sum(axis=1).astype(np.float64)
        weights = np.exp(-dist_sq / (2.0 * self.sigma * self.sigma))
        offsets.setflags(write=False)
        weights.setflags(write=False)
        return offsets, weights

    def offsets(self):
        """(n, 3) int array of (di, dj, dk) offsets."""
        return self._table[0]

    def weights(self):
        """(n,) float array of weights matching offsets()."""
        return self._table[1]


@dataclass(frozen=True)
class PointKernel:
    """Single-cell deposit: the sigma -> 0 limit of GaussianKernel."""

    radius = 0

    def offsets(self):
        return np.zeros((1, 3), dtype=np.int64)

    def weights(self):
        return np.ones(1, dtype=np.float64)

"""
Density Field Engine

A resolution^3 scalar field evolved by

  d(rho)/dt = D * lap(rho) + rho * (1 - rho/MAX) - eps(rho)^2 * rho
  eps(rho)  = max(K / (1 + rho), EPS_MIN)

Lifecycle: every cell starts at the baseline, deposits add localized
perturbations, step() advances time by dt. The outermost shell of cells is
never updated by step() (frozen boundary). Every value written into the
field is clamped to [0, MAX].

Two buffers are allocated up front. step() fills the spare buffer from the
current one and swaps them only once every slab has completed, so a failed
step leaves the field exactly as it was.
"""

import logging
import math

import numpy as np

from .config import (
    DEFAULT_BOUNDS, DEFAULT_CONFIG, DEFAULT_DIFFUSION, DEFAULT_DT,
    DEFAULT_RESOLUTION, baseline_at,
)
from .evolution import Evolution, Snapshot
from .executors import get_executor
from .grid import GridGeometry
from .scalar import ScalarValue, activity_level
from .stepper import copy_boundary, update_slab

logger = logging.getLogger(__name__)


class DensityField:
    """3D reaction-diffusion density field."""

    def __init__(self, resolution=DEFAULT_RESOLUTION, bounds=DEFAULT_BOUNDS,
                 diffusion=DEFAULT_DIFFUSION, dt=DEFAULT_DT, epoch=None,
                 config=None, executor=None):
        """
        Args:
            resolution: Cells per axis (grid is resolution^3)
            bounds: (min, max) physical extent mapped onto every axis
            diffusion: Diffusion coefficient D
            dt: Time step
            epoch: External epoch fed to the baseline policy (0.0 if None)
            config: FieldConfig with rate-law constants and strategies
            executor: Slab executor, registry name, or None for sequential
        """
        if not math.isfinite(dt) or dt <= 0:
            raise ValueError("dt must be finite and > 0")
        if not math.isfinite(diffusion) or diffusion < 0:
            raise ValueError("diffusion must be finite and >= 0")

        self.geometry = GridGeometry(resolution, tuple(bounds))
        self.config = config if config is not None else DEFAULT_CONFIG
        self.diffusion = float(diffusion)
        self.dt = float(dt)
        self.epoch = 0.0 if epoch is None else float(epoch)
        self.baseline = baseline_at(self.epoch, self.config)
        self.executor = get_executor(executor)

        self.time = 0.0
        self.step_count = 0

        # Current and spare buffers, indexed [k, j, i]
        self._field = np.full(self.geometry.shape, self.baseline, dtype=np.float64)
        self._next = np.empty_like(self._field)

        if self.dt * 6.0 * self.diffusion > 1.0:
            logger.warning(
                "dt=%g with D=%g exceeds the explicit stability bound "
                "dt*6*D <= 1; values will be held in range by clamping only",
                self.dt, self.diffusion,
            )

    # -- geometry -------------------------------------------------------

    @property
    def resolution(self):
        return self.geometry.resolution

    @property
    def bounds(self):
        return self.geometry.bounds

    def index_of(self, i, j, k):
        return self.geometry.index_of(i, j, k)

    def position_to_index(self, position):
        return self.geometry.position_to_index(position)

    def index_to_position(self, i, j, k):
        return self.geometry.index_to_position(i, j, k)

    # -- mutation -------------------------------------------------------

    def deposit(self, position, amplitude):
        """Add a kernel-shaped perturbation centred on the cell nearest position.

        Each cell in the kernel support receives amplitude * weight, then is
        re-clamped. Support cells falling off the grid are skipped.

        Returns:
            True if applied, False if position lies outside the grid (the
            field is left unchanged).
        """
        cell = self.geometry.position_to_index(position)
        if cell is None:
            logger.debug("Deposit at %s is outside bounds %s; ignored",
                         position, self.bounds)
            return False

        kernel = self.config.kernel
        cells = np.asarray(cell) + kernel.offsets()
        weights = kernel.weights()
        inside = np.all((cells >= 0) & (cells < self.resolution), axis=1)
        ii, jj, kk = cells[inside].T
        added = self._field[kk, jj, ii] + amplitude * weights[inside]
        # NaN clamps to 0 like FieldConfig.clamp
        added = np.nan_to_num(added, nan=0.0)
        self._field[kk, jj, ii] = np.clip(added, 0.0, self.config.max_value)
        return True

    def step(self):
        """Advance one time step. Returns the field values (read-only view)."""
        src, dst = self._field, self._next
        start, stop = self.geometry.interior_range()

        def fn(k0, k1):
            update_slab(src, dst, k0, k1, self.diffusion, self.dt, self.config)

        self.executor.run(fn, start, stop)
        copy_boundary(src, dst)

        self._field, self._next = dst, src
        self.time += self.dt
        self.step_count += 1
        return self.values()

    def step_n(self, n):
        """Advance n steps. Returns final values."""
        for _ in range(n):
            self.step()
        return self.values()

    def evolution(self, max_steps=None):
        """Iterator yielding a Snapshot after each step."""
        return Evolution(self, max_steps=max_steps)

    def snapshot(self):
        return Snapshot.from_field(self)

    # -- queries --------------------------------------------------------

    def values(self):
        """Read-only view of the [k, j, i] value array."""
        view = self._field.view()
        view.flags.writeable = False
        return view

    def value_at(self, position):
        """ScalarValue at the cell nearest position, or None off-grid."""
        cell = self.geometry.position_to_index(position)
        if cell is None:
            return None
        i, j, k = cell
        return ScalarValue(self._field[k, j, i], self.config)

    def total(self):
        return float(self._field.sum())

    def created(self):
        """Total density above the baseline level."""
        return self.total() - self.baseline * self.geometry.size

    def active_count(self):
        return int(np.count_nonzero(self._field >= self.config.threshold))

    def is_active(self):
        return self.active_count() > 0

    def max_activity(self):
        return float(activity_level(self._field.max(), self.config))

    def active_cells(self):
        """Yield ((x, y, z), level) for every active cell.

        Walks the full grid, i outermost and k innermost. Meant for
        diagnostics rather than per-step use.
        """
        # transpose to [i, j, k] so argwhere walks i outermost
        by_ijk = self._field.transpose(2, 1, 0)
        levels = activity_level(by_ijk, self.config)
        for i, j, k in np.argwhere(by_ijk >= self.config.threshold):
            yield (self.geometry.index_to_position(int(i), int(j), int(k)),
                   float(levels[i, j, k]))

    @property
    def stats(self):
        """Return current field statistics."""
        active = self.active_count()
        return {
            "step": self.step_count,
            "time": self.time,
            "total": self.total(),
            "created": self.created(),
            "mean": float(self._field.mean()),
            "max": float(self._field.max()),
            "active_count": active,
            "active_pct": active / self.geometry.size * 100,
            "max_activity": self.max_activity(),
        }

    def close(self):
        """Release the executor's workers, if it has any."""
        self.executor.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __repr__(self):
        return (f"DensityField(resolution={self.resolution}, bounds={self.bounds}, "
                f"diffusion={self.diffusion}, dt={self.dt}, epoch={self.epoch}, "
                f"step={self.step_count})")

"""
Field Configuration

Every constant that shapes the rate law lives on an immutable FieldConfig,
together with the two strategies a field is built from:

- baseline policy: the starting density of every cell, either a fixed value
  or an exponential function of an external epoch
- deposit kernel: how a perturbation spreads around its target cell

Module-level constants only provide the defaults.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

from .kernels import GaussianKernel, PointKernel

# Activation threshold, 1/sqrt(2)
ACTIVATION_THRESHOLD = 1.0 / math.sqrt(2.0)

# Saturation ceiling for every cell
MAX_DENSITY = 16.0

# Baseline density of an unperturbed field
VACUUM_DENSITY = 11.62

# eps(x) = max(K / (1 + x), EPS_MIN)
UNCERTAINTY_SCALE = 0.5
MIN_UNCERTAINTY = 0.01

# Growth rate of the epoch baseline, per epoch unit
EPOCH_GROWTH_RATE = 0.2032

DEFAULT_RESOLUTION = 64
DEFAULT_BOUNDS = (-4.0, 4.0)
DEFAULT_DIFFUSION = 1.0
DEFAULT_DT = 0.001


@dataclass(frozen=True)
class FixedBaseline:
    """Baseline that ignores the epoch."""

    value: float = VACUUM_DENSITY

    def at(self, epoch):
        return self.value


@dataclass(frozen=True)
class EpochBaseline:
    """Baseline growing exponentially with the epoch.

    at(epoch) = initial * exp(growth_rate * epoch)

    The default starts exactly at the activation threshold, so an epoch-0
    field is marginally active everywhere.
    """

    initial: float = ACTIVATION_THRESHOLD
    growth_rate: float = EPOCH_GROWTH_RATE

    def at(self, epoch):
        if self.initial == 0:
            return 0.0
        try:
            growth = math.exp(self.growth_rate * epoch)
        except OverflowError:
            growth = math.inf
        return self.initial * growth


@dataclass(frozen=True)
class FieldConfig:
    """Rate-law constants plus baseline and deposit strategies."""

    threshold: float = ACTIVATION_THRESHOLD
    max_value: float = MAX_DENSITY
    uncertainty_scale: float = UNCERTAINTY_SCALE
    min_uncertainty: float = MIN_UNCERTAINTY
    baseline: FixedBaseline | EpochBaseline = field(default_factory=FixedBaseline)
    kernel: GaussianKernel | PointKernel = field(default_factory=GaussianKernel)

    def __post_init__(self) -> None:
        if self.max_value <= 0:
            raise ValueError("max_value must be > 0")
        if not 0 <= self.threshold < self.max_value:
            raise ValueError("threshold must be in [0, max_value)")
        if self.uncertainty_scale < 0:
            raise ValueError("uncertainty_scale must be >= 0")
        if self.min_uncertainty <= 0:
            raise ValueError("min_uncertainty must be > 0")

    def with_options(self, **changes) -> FieldConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def clamp(self, x):
        """Clamp a float into [0, max_value]. NaN maps to 0."""
        x = float(x)
        if math.isnan(x):
            return 0.0
        return min(max(x, 0.0), self.max_value)


DEFAULT_CONFIG = FieldConfig()


def baseline_at(epoch, config=DEFAULT_CONFIG):
    """Resolve the config's baseline policy at an epoch, clamped to range."""
    return config.clamp(config.baseline.at(epoch))

"""
Scalar Density Value and Rate Law

The intrinsic (non-diffusive) part of the update:

  rate(x)   = self_interaction(x) + uncertainty_decay(x)
  self(x)   = x * (1 - x / MAX)            logistic self-amplification
  eps(x)    = max(K / (1 + x), EPS_MIN)    uncertainty, floored
  decay(x)  = -eps(x)^2 * x

The module-level functions accept floats or numpy arrays, so the stepper
evaluates exactly the same expressions cell-wise that ScalarValue
evaluates for a single cell.
"""

import numpy as np

from .config import DEFAULT_CONFIG


def self_interaction(x, config=DEFAULT_CONFIG):
    return x * (1.0 - x / config.max_value)


def uncertainty(x, config=DEFAULT_CONFIG):
    return np.maximum(config.uncertainty_scale / (1.0 + x), config.min_uncertainty)


def uncertainty_decay(x, config=DEFAULT_CONFIG):
    return -uncertainty(x, config) ** 2 * x


def intrinsic_rate(x, config=DEFAULT_CONFIG):
    """Total intrinsic change rate, excluding diffusion."""
    return self_interaction(x, config) + uncertainty_decay(x, config)


def activity_level(x, config=DEFAULT_CONFIG):
    """Normalized activity (x - threshold) / (MAX - threshold), floored at 0."""
    level = (x - config.threshold) / (config.max_value - config.threshold)
    return np.maximum(level, 0.0)


class ScalarValue:
    """A single density value, clamped into [0, MAX] at construction.

    Immutable: arithmetic on the field produces new values rather than
    mutating existing ones.
    """

    __slots__ = ("_value", "_config")

    def __init__(self, x, config=DEFAULT_CONFIG):
        object.__setattr__(self, "_value", config.clamp(x))
        object.__setattr__(self, "_config", config)

    def __setattr__(self, name, value):
        raise AttributeError("ScalarValue is immutable")

    @property
    def value(self):
        return self._value

    @property
    def config(self):
        return self._config

    def is_active(self, threshold=None):
        """True when the value is at or above the activation threshold."""
        if threshold is None:
            threshold = self._config.threshold
        return self._value >= threshold

    def activity_level(self):
        return float(activity_level(self._value, self._config))

    def uncertainty(self):
        return float(uncertainty(self._value, self._config))

    def intrinsic_rate(self):
        return float(intrinsic_rate(self._value, self._config))

    def __float__(self):
        return self._value

    def __eq__(self, other):
        if isinstance(other, ScalarValue):
            return self._value == other._value
        return NotImplemented

    def __hash__(self):
        return hash(self._value)

    def __repr__(self):
        return f"ScalarValue({self._value!r})"

#!/usr/bin/env python3
"""
Tests for the scalar value and rate law.

Verifies:
1. Clamping into [0, MAX] for any input
2. Activation threshold at exactly 1/sqrt(2)
3. Rate-law terms against hand-written formulas
4. Config constants can be varied independently
"""

import math

import numpy as np
import pytest

from density_field.config import (
    ACTIVATION_THRESHOLD, DEFAULT_CONFIG, EpochBaseline, FieldConfig,
    FixedBaseline, baseline_at,
)
from density_field.scalar import (
    ScalarValue, intrinsic_rate, self_interaction, uncertainty,
    uncertainty_decay,
)


def reference_rate(x, max_value=16.0, k=0.5, eps_min=0.01):
    eps = max(k / (1.0 + x), eps_min)
    return x * (1.0 - x / max_value) - eps ** 2 * x


@pytest.mark.parametrize("x, expected", [
    (-3.0, 0.0), (0.0, 0.0), (5.5, 5.5), (16.0, 16.0), (1e9, 16.0),
    (float("-inf"), 0.0), (float("inf"), 16.0), (float("nan"), 0.0),
])
def test_clamp(x, expected):
    assert ScalarValue(x).value == expected


def test_clamp_uses_config_ceiling():
    cfg = FieldConfig(max_value=4.0, threshold=0.5)
    assert ScalarValue(10.0, cfg).value == 4.0
    assert ScalarValue(3.0, cfg).value == 3.0


def test_threshold_is_inverse_sqrt_two():
    assert abs(ACTIVATION_THRESHOLD - 1.0 / math.sqrt(2.0)) < 1e-15
    assert DEFAULT_CONFIG.threshold == ACTIVATION_THRESHOLD


def test_is_active_at_threshold():
    assert not ScalarValue(0.5).is_active()
    assert ScalarValue(ACTIVATION_THRESHOLD).is_active()
    assert not ScalarValue(np.nextafter(ACTIVATION_THRESHOLD, 0.0)).is_active()
    assert ScalarValue(1.0).is_active()


def test_is_active_explicit_threshold():
    v = ScalarValue(2.0)
    assert v.is_active(1.5)
    assert not v.is_active(2.5)


def test_activity_level():
    assert ScalarValue(0.3).activity_level() == 0.0
    assert ScalarValue(ACTIVATION_THRESHOLD).activity_level() == 0.0
    assert abs(ScalarValue(16.0).activity_level() - 1.0) < 1e-12
    mid = ScalarValue(8.0).activity_level()
    expected = (8.0 - ACTIVATION_THRESHOLD) / (16.0 - ACTIVATION_THRESHOLD)
    assert abs(mid - expected) < 1e-12


@pytest.mark.parametrize("x", [0.0, 0.25, ACTIVATION_THRESHOLD, 1.0, 5.0, 7.0, 11.62, 16.0])
def test_intrinsic_rate_matches_formula(x):
    got = ScalarValue(x).intrinsic_rate()
    assert abs(got - reference_rate(x)) < 1e-12, f"rate({x}) = {got}"


def test_self_interaction_zero_at_ends():
    assert self_interaction(0.0) == 0.0
    assert self_interaction(16.0) == 0.0
    assert self_interaction(8.0) > self_interaction(2.0)
    assert self_interaction(8.0) > self_interaction(14.0)


def test_uncertainty_floor():
    # K / (1 + x) drops below the floor once x > 49
    cfg = FieldConfig(max_value=100.0)
    assert abs(float(uncertainty(60.0, cfg)) - 0.01) < 1e-15
    assert abs(float(uncertainty(1.0)) - 0.25) < 1e-15
    assert float(uncertainty_decay(0.0)) == 0.0
    assert float(uncertainty_decay(1.0)) < 0.0


def test_rate_vectorized_matches_scalar():
    xs = np.linspace(0.0, 16.0, 33)
    rates = intrinsic_rate(xs)
    for x, r in zip(xs, rates):
        assert abs(r - ScalarValue(x).intrinsic_rate()) < 1e-12


def test_rate_uses_config_constants():
    cfg = FieldConfig(max_value=10.0, uncertainty_scale=1.0, min_uncertainty=0.2)
    for x in (0.5, 2.0, 9.0):
        expected = reference_rate(x, max_value=10.0, k=1.0, eps_min=0.2)
        assert abs(ScalarValue(x, cfg).intrinsic_rate() - expected) < 1e-12


def test_scalar_value_is_immutable():
    v = ScalarValue(1.0)
    with pytest.raises(AttributeError):
        v.x = 2.0
    assert ScalarValue(1.0) == v
    assert float(v) == 1.0


@pytest.mark.parametrize("kwargs", [
    {"max_value": 0.0},
    {"threshold": 20.0},
    {"threshold": -1.0},
    {"min_uncertainty": 0.0},
    {"uncertainty_scale": -0.5},
])
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ValueError):
        FieldConfig(**kwargs)


def test_baseline_policies():
    assert FixedBaseline(3.0).at(100.0) == 3.0
    epoch = EpochBaseline()
    assert epoch.at(0.0) == ACTIVATION_THRESHOLD
    assert abs(epoch.at(13.8) - ACTIVATION_THRESHOLD * math.exp(0.2032 * 13.8)) < 1e-12
    assert epoch.at(5.0) > epoch.at(1.0)


def test_baseline_at_clamps():
    cfg = FieldConfig(baseline=EpochBaseline(initial=1.0, growth_rate=1.0))
    assert baseline_at(100.0, cfg) == cfg.max_value
    cfg = FieldConfig(baseline=FixedBaseline(-2.0))
    assert baseline_at(0.0, cfg) == 0.0


def test_epoch_baseline_overflow_saturates():
    epoch = EpochBaseline()
    assert epoch.at(5000.0) == math.inf
    assert baseline_at(5000.0, FieldConfig(baseline=epoch)) == 16.0
    assert EpochBaseline(initial=0.0).at(5000.0) == 0.0
    assert epoch.at(-5000.0) == 0.0


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-q"]))

"""
density_field - 3D reaction-diffusion density field

  d(rho)/dt = D * lap(rho) + rho * (1 - rho/MAX) - eps(rho)^2 * rho

Usage:
    from density_field import DensityField
    field = DensityField(resolution=32, bounds=(-2.0, 2.0), dt=0.005)
    field.deposit((0.0, 0.0, 0.0), 2.0)
    for snap in field.evolution(max_steps=10):
        print(snap)
"""

from .config import (
    ACTIVATION_THRESHOLD, DEFAULT_CONFIG, MAX_DENSITY, VACUUM_DENSITY,
    EpochBaseline, FieldConfig, FixedBaseline, baseline_at,
)
from .evolution import Evolution, Snapshot
from .executors import SequentialExecutor, ThreadedExecutor
from .field import DensityField
from .grid import GridGeometry
from .kernels import GaussianKernel, PointKernel
from .presets import (
    PRESET_ORDER, PRESETS, create_field, cosmic_field, electromagnetic_field,
    field_with_deposit, get_preset, high_performance_cosmic_field,
    high_performance_field, list_presets, multi_center_field,
    primordial_field, vacuum_field,
)
from .scalar import ScalarValue

__all__ = [
    "ACTIVATION_THRESHOLD",
    "DEFAULT_CONFIG",
    "MAX_DENSITY",
    "VACUUM_DENSITY",
    "DensityField",
    "EpochBaseline",
    "Evolution",
    "FieldConfig",
    "FixedBaseline",
    "GaussianKernel",
    "GridGeometry",
    "PointKernel",
    "PRESETS",
    "PRESET_ORDER",
    "ScalarValue",
    "SequentialExecutor",
    "Snapshot",
    "ThreadedExecutor",
    "baseline_at",
    "cosmic_field",
    "create_field",
    "electromagnetic_field",
    "field_with_deposit",
    "get_preset",
    "high_performance_cosmic_field",
    "high_performance_field",
    "list_presets",
    "multi_center_field",
    "primordial_field",
    "vacuum_field",
]

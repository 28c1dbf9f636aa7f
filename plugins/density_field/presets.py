"""
Density Field Presets

Each preset names a grid geometry, time step and baseline policy known to
be useful. Baseline "fixed" starts every cell at the vacuum density;
"epoch" evaluates the exponential epoch baseline at the field's epoch.
"""

from .config import DEFAULT_CONFIG, EpochBaseline, FixedBaseline
from .field import DensityField

PRESETS = {
    "vacuum": {
        "name": "Vacuum",
        "description": "Default 64^3 grid at the fixed vacuum density",
        "resolution": 64, "bounds": (-4.0, 4.0), "diffusion": 1.0, "dt": 0.001,
        "baseline": "fixed",
    },
    "electromagnetic": {
        "name": "Fine Gradient",
        "description": "48^3 grid over a tighter extent for gradient work",
        "resolution": 48, "bounds": (-3.0, 3.0), "diffusion": 1.0, "dt": 0.005,
        "baseline": "fixed",
    },
    "high_performance": {
        "name": "Large Threaded",
        "description": "96^3 grid stepped on a thread pool",
        "resolution": 96, "bounds": (-6.0, 6.0), "diffusion": 1.0, "dt": 0.001,
        "baseline": "fixed", "executor": "threaded",
    },
    "primordial": {
        "name": "Primordial",
        "description": "Epoch baseline at epoch 0: every cell at the threshold",
        "resolution": 64, "bounds": (-4.0, 4.0), "diffusion": 1.0, "dt": 0.001,
        "baseline": "epoch", "epoch": 0.0,
    },
    "cosmic": {
        "name": "Epoch",
        "description": "Epoch baseline evaluated at a caller-supplied epoch",
        "resolution": 64, "bounds": (-4.0, 4.0), "diffusion": 1.0, "dt": 0.001,
        "baseline": "epoch", "epoch": 13.8,
    },
}

PRESET_ORDER = ["vacuum", "electromagnetic", "high_performance", "primordial", "cosmic"]

_BASELINES = {
    "fixed": FixedBaseline,
    "epoch": EpochBaseline,
}

# Amplitude of a typical localized deposit above the baseline
DEFAULT_DEPOSIT_AMPLITUDE = 2.0


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def list_presets():
    """Return list of (key, name, description) for presets."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER if k in PRESETS]


def create_field(preset="vacuum", config=None, **overrides):
    """Build a DensityField from a preset, with keyword overrides.

    Args:
        preset: Preset key (see PRESET_ORDER)
        config: Base FieldConfig; its baseline is replaced by the preset's
            policy unless "baseline" is overridden with a policy object
        **overrides: resolution, bounds, diffusion, dt, epoch, executor,
            baseline

    Raises:
        ValueError: unknown preset name or baseline kind
    """
    p = get_preset(preset)
    if p is None:
        raise ValueError(f"Unknown preset: {preset!r}. "
                         f"Choose from {PRESET_ORDER}")
    params = {**p, **overrides}

    base = config if config is not None else DEFAULT_CONFIG
    baseline = params.get("baseline", "fixed")
    if isinstance(baseline, str):
        cls = _BASELINES.get(baseline)
        if cls is None:
            raise ValueError(f"Unknown baseline: {baseline!r}")
        # Keep a caller-supplied policy of the same kind
        baseline = base.baseline if isinstance(base.baseline, cls) else cls()

    return DensityField(
        resolution=params["resolution"],
        bounds=params["bounds"],
        diffusion=params["diffusion"],
        dt=params["dt"],
        epoch=params.get("epoch"),
        config=base.with_options(baseline=baseline),
        executor=params.get("executor"),
    )


def vacuum_field():
    """Default field at the fixed vacuum density."""
    return create_field("vacuum")


def field_with_deposit(position, amplitude):
    """Default field with one deposit applied."""
    field = create_field("vacuum")
    field.deposit(position, amplitude)
    return field


def high_performance_field():
    return create_field("high_performance")


def electromagnetic_field():
    return create_field("electromagnetic")


def multi_center_field(positions, amplitude=DEFAULT_DEPOSIT_AMPLITUDE):
    """Fine-gradient field with one deposit at each position.

    Positions off the grid are skipped.
    """
    field = create_field("electromagnetic")
    for position in positions:
        field.deposit(position, amplitude)
    return field


def cosmic_field(epoch):
    """Default geometry with the baseline evaluated at `epoch`."""
    return create_field("cosmic", epoch=epoch)


def primordial_field():
    return create_field("primordial")


def high_performance_cosmic_field(epoch):
    return create_field("high_performance", baseline="epoch", epoch=epoch)

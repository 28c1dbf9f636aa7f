"""
Snapshots and Stepped Evolution

Evolution is a pull-driven iterator over a field: each next() performs one
step() and returns a Snapshot of the post-step field. Nothing is buffered;
stop pulling to stop evolving.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Snapshot:
    """Aggregate state of a field after a step."""

    step: int
    time: float
    total: float
    created: float
    active_count: int
    max_activity: float
    is_active: bool

    @classmethod
    def from_field(cls, field) -> Snapshot:
        active_count = field.active_count()
        return cls(
            step=field.step_count,
            time=field.time,
            total=field.total(),
            created=field.created(),
            active_count=active_count,
            max_activity=field.max_activity(),
            is_active=active_count > 0,
        )

    def __str__(self):
        return (f"Step {self.step}: {self.total:.1f} total "
                f"({self.created:.1f} net), {self.active_count} active "
                f"(max {self.max_activity:.3f})")


class Evolution:
    """Iterator stepping a field once per pull.

    Args:
        field: DensityField to advance
        max_steps: Stop once field.step_count reaches this value. The bound
            is on the field's own counter, so steps taken before iteration
            count against it. None iterates forever.
    """

    def __init__(self, field, max_steps=None):
        if max_steps is not None and max_steps < 0:
            raise ValueError("max_steps must be >= 0")
        self.field = field
        self.max_steps = max_steps

    def __iter__(self):
        return self

    def __next__(self) -> Snapshot:
        if self.max_steps is not None and self.field.step_count >= self.max_steps:
            raise StopIteration
        self.field.step()
        return Snapshot.from_field(self.field)

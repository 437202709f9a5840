"""Schema diffing beyond the additive plan."""

from shift_engine.diff.extras import compute_extras

__all__ = [
    "compute_extras",
]

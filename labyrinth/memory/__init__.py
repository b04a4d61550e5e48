"""Bot memory between turns."""

from .belief import BeliefState

__all__ = [
    "BeliefState",
]

"""Per-key history length cap."""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

DEFAULT_MAX_ENTRIES = 30


def bound_history(history: Sequence[T], cap: int = DEFAULT_MAX_ENTRIES) -> list[T]:
    """Keep the most recent ``cap`` entries, dropping the oldest first."""
    if cap < 1:
        raise ValueError(f"cap must be >= 1, got {cap}")
    if len(history) <= cap:
        return list(history)
    return list(history[-cap:])

from __future__ import annotations

from typing import List, Literal, Sequence, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)

Direction = Literal["up", "down"]


def normalize_order(items: Sequence[T]) -> List[T]:
    """Copy `items` with `order` rewritten to the dense sequence 0..n-1 (list position wins)."""
    return [item.model_copy(update={"order": i}) for i, item in enumerate(items)]


def reorder(items: Sequence[T], from_index: int, to_index: int) -> List[T]:
    """
    Move one element and renormalize `order`.

    Used the same way for a form's sections and a section's fields. Indices
    outside the list raise IndexError.
    """
    n = len(items)
    if not 0 <= from_index < n:
        raise IndexError(f"from_index {from_index} out of range for {n} items")
    if not 0 <= to_index < n:
        raise IndexError(f"to_index {to_index} out of range for {n} items")
    out = list(items)
    moved = out.pop(from_index)
    out.insert(to_index, moved)
    return normalize_order(out)


def adjacent_index(index: int, direction: Direction, size: int) -> int:
    """
    Target index for a one-step move, clamped at both ends.

    Returns `index` itself when the move would leave the list.
    """
    if direction == "up":
        return index - 1 if index > 0 else index
    if direction == "down":
        return index + 1 if index < size - 1 else index
    raise ValueError(f"direction must be 'up' or 'down', got {direction!r}")

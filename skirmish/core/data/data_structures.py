"""Core value types for grid positions and identity tracking.

Cell is the immutable coordinate used throughout the grid and path finder.
Grid masks built from cells use [y, x] indexing.

IdentitySet tracks objects by identity rather than equality; combatants with
identical stats must never collide in acted-this-round bookkeeping.
"""

from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, TypeVar


@dataclass(frozen=True)
class Cell:
    """2D grid coordinate.

    Uses (x, y) ordering: x is the column, y is the row. Frozen so cells can
    be used as set members and dictionary keys.
    """
    x: int
    y: int

    def __repr__(self) -> str:
        return f"Cell({self.x}, {self.y})"


T = TypeVar("T")


class IdentitySet(Generic[T]):
    """Set keyed by object identity.

    Holds a reference to every member so ids stay valid for the lifetime of
    the set.
    """

    def __init__(self, items: Optional[Iterable[T]] = None):
        self._items: dict[int, T] = {}
        if items is not None:
            for item in items:
                self.add(item)

    def add(self, item: T) -> None:
        self._items[id(item)] = item

    def __contains__(self, item: Any) -> bool:
        return id(item) in self._items and self._items[id(item)] is item

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"IdentitySet({len(self._items)} items)"

"""Army: an ordered roster of combatants plus the points spent on it."""

from typing import Iterable, Optional

from .combatant import Combatant


class Army:
    """One side's combatants in roster order."""

    def __init__(self, units: Optional[Iterable[Combatant]] = None, points: int = 0):
        self.units: list[Combatant] = list(units) if units is not None else []
        self.points = points

    def add(self, unit: Combatant) -> None:
        self.units.append(unit)

    def living(self) -> list[Combatant]:
        return [unit for unit in self.units if unit is not None and unit.alive]

    def count_alive(self) -> int:
        return len(self.living())

    def has_alive(self) -> bool:
        return any(unit is not None and unit.alive for unit in self.units)

    def columns(self, first_column: int, count: int = 3) -> list[list[Combatant]]:
        """Group units into count consecutive x columns starting at first_column.

        Units outside those columns are left out. Dead units are kept; the
        target finder decides what they block.
        """
        grouped: list[list[Combatant]] = [[] for _ in range(count)]
        for unit in self.units:
            if unit is None:
                continue
            offset = unit.position.x - first_column
            if 0 <= offset < count:
                grouped[offset].append(unit)
        return grouped

    def __len__(self) -> int:
        return len(self.units)

    def __iter__(self):
        return iter(self.units)

    def __repr__(self) -> str:
        return f"Army(units={len(self.units)}, alive={self.count_alive()}, points={self.points})"

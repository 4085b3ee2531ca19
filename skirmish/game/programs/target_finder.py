"""Line-of-sight filter for attack targets.

The target side is given as its three placement columns. The column facing
the attacker is the front: every living unit there is visible. A middle
column unit is visible only if no living front unit shares its row, and a
back column unit only if no living middle unit shares its row. Only the
immediate neighbouring column blocks.
"""

from typing import Callable, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from ...core.engine.grid import DEFAULT_HEIGHT
from ...core.events import BattleEvent, TargetsUnavailable
from ..entities.combatant import Combatant

Column = Optional[Sequence[Optional[Combatant]]]


class SuitableTargetFinder:
    """Selects the enemy units an attacker can currently see."""

    def __init__(
        self,
        height: int = DEFAULT_HEIGHT,
        event_emitter: Optional[Callable[[BattleEvent], None]] = None,
    ):
        self.height = height
        self.emit_event = event_emitter or (lambda e: None)

    def find_targets(self, columns: Optional[Sequence[Column]], is_left_army_target: bool) -> list[Combatant]:
        """Return the visible living units of the target side.

        Args:
            columns: Exactly three column lists of the target side, ordered by x
            is_left_army_target: True when the target side occupies the left columns

        Returns:
            Visible units (front, then middle, then back), or [] when nothing is visible
        """
        if columns is None or len(columns) != 3:
            self.emit_event(TargetsUnavailable(reason="expected exactly three columns"))
            return []

        # The left army faces right, so its front is its highest column.
        front_index = 2 if is_left_army_target else 0
        back_index = 0 if is_left_army_target else 2
        front = columns[front_index] or []
        middle = columns[1] or []
        back = columns[back_index] or []

        front_rows = self._living_rows(front)
        middle_rows = self._living_rows(middle)

        visible = [unit for unit in front if unit is not None and unit.alive]
        visible.extend(self._unblocked(middle, front_rows))
        visible.extend(self._unblocked(back, middle_rows))

        if not visible:
            self.emit_event(TargetsUnavailable())
        return visible

    def _living_rows(self, column: Sequence[Optional[Combatant]]) -> NDArray[np.bool_]:
        rows = np.zeros(self.height, dtype=np.bool_)
        for unit in column:
            if unit is None or not unit.alive:
                continue
            if 0 <= unit.y < self.height:
                rows[unit.y] = True
        return rows

    def _unblocked(self, column: Sequence[Optional[Combatant]], blocking_rows: NDArray[np.bool_]) -> list[Combatant]:
        result = []
        for unit in column:
            if unit is None or not unit.alive:
                continue
            if 0 <= unit.y < self.height and not blocking_rows[unit.y]:
                result.append(unit)
        return result

"""Per-side turn ordering for one battle round.

A TurnQueue is a min-heap of TurnEntry objects ordered by power descending,
then by insertion sequence, so equal-power combatants keep the order in which
the army lists them. Entries are validated lazily: a combatant that died or
already acted after being queued is skipped when it reaches the top instead
of being searched for and removed.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from ..data import IdentitySet, Side

if TYPE_CHECKING:
    from ...game.entities.combatant import Combatant


@dataclass(eq=False)
class TurnEntry:
    """A queued combatant.

    Primary order: power (higher acts first).
    Secondary: sequence_id (stable order for equal power).
    """

    power: int
    sequence_id: int
    combatant: "Combatant"

    def __lt__(self, other: "TurnEntry") -> bool:
        if self.power != other.power:
            return self.power > other.power
        return self.sequence_id < other.sequence_id


def is_eligible(combatant: Optional["Combatant"], acted: IdentitySet) -> bool:
    """A combatant may act if it exists, is alive and has not acted this round."""
    return combatant is not None and combatant.alive and combatant not in acted


class TurnQueue:
    """Acting order of one side's not-yet-acted, living combatants."""

    def __init__(self, side: Optional[Side] = None):
        self.side = side
        self._queue: list[TurnEntry] = []
        self._sequence_counter = 0

    def push(self, combatant: "Combatant") -> TurnEntry:
        """Queue a combatant behind every already queued one of equal power."""
        self._sequence_counter += 1
        entry = TurnEntry(
            power=combatant.power,
            sequence_id=self._sequence_counter,
            combatant=combatant,
        )
        heapq.heappush(self._queue, entry)
        return entry

    def pop_next(self, acted: IdentitySet) -> Optional["Combatant"]:
        """Remove and return the strongest combatant still eligible to act.

        Stale entries (dead or already acted) are discarded on the way.

        Returns:
            The combatant, or None when nobody on this side can act
        """
        while self._queue:
            entry = heapq.heappop(self._queue)
            if is_eligible(entry.combatant, acted):
                return entry.combatant
        return None

    def __len__(self) -> int:
        """Number of queued entries, stale ones included."""
        return len(self._queue)

class TurnQueueBuilder:
    """Builds the deterministic per-side acting order for a round."""

    def build(
        self,
        combatants: Optional[Iterable[Optional["Combatant"]]],
        acted: IdentitySet,
        side: Optional[Side] = None,
    ) -> TurnQueue:
        """Queue every living combatant that has not acted yet, in list order."""
        queue = TurnQueue(side)
        if combatants is None:
            return queue

        for combatant in combatants:
            if is_eligible(combatant, acted):
                queue.push(combatant)
        return queue

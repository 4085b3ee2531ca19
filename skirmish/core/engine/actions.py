"""Action program capability.

The scheduler is polymorphic over this single-method contract only. A
program decides what its combatant does on its turn and reports the target
it attacked, or None when it did nothing. Programs may damage or kill other
combatants as a side effect and may raise BattleCancelled while pacing.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from ...game.entities.combatant import Combatant


class ActionProgram(ABC):
    """Abstract base class for per-combatant action callbacks."""

    @abstractmethod
    def attack(self) -> Optional["Combatant"]:
        """Perform this turn's action.

        Returns:
            The attacked combatant, or None when no target was engaged
        """
        pass


class CallbackProgram(ActionProgram):
    """Adapts a zero-argument callable to the ActionProgram contract."""

    def __init__(self, callback: Callable[[], Optional["Combatant"]]):
        self.callback = callback

    def attack(self) -> Optional["Combatant"]:
        return self.callback()


class IdleProgram(ActionProgram):
    """Program that never engages a target."""

    def attack(self) -> Optional["Combatant"]:
        return None

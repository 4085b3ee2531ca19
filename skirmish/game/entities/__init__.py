"""Battle entities."""

from .army import Army
from .combatant import Combatant

__all__ = ["Army", "Combatant"]

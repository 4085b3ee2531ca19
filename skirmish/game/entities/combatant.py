"""Battle combatant.

A Combatant is a mutable unit record: stats copied from its UnitTemplate,
a grid position, an alive flag and the action program that drives it on its
turn. Combatants compare by identity; two units with equal stats are still
different units.
"""

import uuid
from typing import TYPE_CHECKING, Optional

from ...core.data import Cell

if TYPE_CHECKING:
    from ...core.config_loader import UnitTemplate
    from ...core.engine.actions import ActionProgram


class Combatant:
    """A unit taking part in a battle."""

    def __init__(
        self,
        name: str,
        unit_type: str,
        health: int,
        base_attack: int,
        cost: int = 0,
        attack_type: str = "melee",
        attack_bonuses: Optional[dict[str, int]] = None,
        defence_bonuses: Optional[dict[str, int]] = None,
        position: Optional[Cell] = None,
        combatant_id: Optional[str] = None,
    ):
        self.combatant_id = combatant_id or str(uuid.uuid4())
        self.name = name
        self.unit_type = unit_type
        self.health = health
        self.base_attack = base_attack
        self.cost = cost
        self.attack_type = attack_type
        self.attack_bonuses = dict(attack_bonuses or {})
        self.defence_bonuses = dict(defence_bonuses or {})
        self.position = position if position is not None else Cell(0, 0)
        self.alive = health > 0
        self.program: Optional["ActionProgram"] = None

    @classmethod
    def from_template(cls, template: "UnitTemplate", name: str, position: Cell) -> "Combatant":
        """Create a fresh combatant with a copy of the template's stats."""
        return cls(
            name=name,
            unit_type=template.unit_type,
            health=template.health,
            base_attack=template.base_attack,
            cost=template.cost,
            attack_type=template.attack_type,
            attack_bonuses=template.attack_bonuses,
            defence_bonuses=template.defence_bonuses,
            position=position,
        )

    @property
    def power(self) -> int:
        """Turn-order strength: stronger combatants act first."""
        return self.base_attack

    @property
    def is_ranged(self) -> bool:
        return self.attack_type.lower() == "ranged"

    @property
    def x(self) -> int:
        return self.position.x

    @property
    def y(self) -> int:
        return self.position.y

    def take_damage(self, amount: int) -> bool:
        """Apply damage.

        Returns:
            True if this hit killed the combatant
        """
        if not self.alive:
            return False

        self.health -= max(0, amount)
        if self.health <= 0:
            self.health = 0
            self.alive = False
            return True
        return False

    def __repr__(self) -> str:
        status = "alive" if self.alive else "dead"
        return f"Combatant({self.name!r}, hp={self.health}, atk={self.base_attack}, {self.position}, {status})"

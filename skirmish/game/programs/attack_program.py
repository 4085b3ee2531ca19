"""Default action program: attack the best visible enemy.

Ranged units shoot the weakest visible target. Melee units strike the
visible target with the shortest path around other living units and skip
their turn when no visible target is reachable.
"""

from typing import Optional

from ...core.config_loader import PLACEMENT_COLUMNS
from ...core.data import Side
from ...core.engine.actions import ActionProgram
from ...core.engine.pathfinding import PathFinder
from ..entities.army import Army
from ..entities.combatant import Combatant
from .pacing import GameSpeed
from .target_finder import SuitableTargetFinder


def compute_damage(attacker: Combatant, target: Combatant) -> int:
    """Damage dealt by one hit, never negative."""
    damage = (
        attacker.base_attack
        + attacker.attack_bonuses.get(target.unit_type, 0)
        - target.defence_bonuses.get(attacker.attack_type, 0)
    )
    return max(0, damage)


class AttackProgram(ActionProgram):
    """Targets and strikes an enemy on behalf of one combatant."""

    def __init__(
        self,
        unit: Combatant,
        allies: Army,
        enemies: Army,
        target_finder: SuitableTargetFinder,
        path_finder: PathFinder,
        game_speed: GameSpeed,
        side: Side,
        enemy_first_column: int,
        enemies_on_left: bool,
    ):
        self.unit = unit
        self.allies = allies
        self.enemies = enemies
        self.target_finder = target_finder
        self.path_finder = path_finder
        self.game_speed = game_speed
        self.side = side
        self.enemy_first_column = enemy_first_column
        self.enemies_on_left = enemies_on_left

    def attack(self) -> Optional[Combatant]:
        if not self.unit.alive:
            return None

        columns = self.enemies.columns(self.enemy_first_column, PLACEMENT_COLUMNS)
        candidates = self.target_finder.find_targets(columns, self.enemies_on_left)
        if not candidates:
            return None

        if self.unit.is_ranged:
            target = min(candidates, key=lambda unit: unit.health)
        else:
            target = self._closest_reachable(candidates)
            if target is None:
                return None

        target.take_damage(compute_damage(self.unit, target))
        self.game_speed.pause()
        return target

    def _closest_reachable(self, candidates: list[Combatant]) -> Optional[Combatant]:
        """Candidate with the shortest path; the first one wins ties."""
        battlefield = self.allies.units + self.enemies.units
        best: Optional[Combatant] = None
        best_length = 0
        for candidate in candidates:
            path = self.path_finder.find_target_path(self.unit, candidate, battlefield)
            if path and (best is None or len(path) < best_length):
                best = candidate
                best_length = len(path)
        return best

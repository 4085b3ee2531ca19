"""Battle session wiring.

BattleSession composes everything a battle needs from a BattleConfig: the
grid, path finder, target finder, preset generator, pacing, log manager and
scheduler, all reporting through one EventManager. Without an explicit
config the bundled assets/config/battle.yaml is loaded.

The computer army is deployed in the leftmost placement columns and the
player army in the rightmost ones, so the two front columns face each other
across the grid.
"""

import random
from typing import Optional

from ..core.cancellation import CancellationToken
from ..core.config_loader import BattleConfig, BattleConfigLoader
from ..core.data import Side
from ..core.engine import BattleResult, BattleScheduler, GridModel, PathFinder
from ..core.events import BattleEvent, EventManager
from .entities.army import Army
from .log_manager import LogLevel, LogManager
from .programs.attack_program import AttackProgram
from .programs.pacing import GameSpeed
from .programs.preset_generator import PresetGenerator
from .programs.target_finder import SuitableTargetFinder


class BattleSession:
    """Sets up and runs one battle between the player and the computer."""

    def __init__(
        self,
        config: Optional[BattleConfig] = None,
        event_manager: Optional[EventManager] = None,
        cancel_token: Optional[CancellationToken] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or BattleConfigLoader().load()
        self.event_manager = event_manager or EventManager()
        self.cancel_token = cancel_token or CancellationToken()

        self.log_manager = LogManager(
            self.event_manager,
            max_messages=self.config.logging.max_messages,
            default_level=LogLevel[self.config.logging.level],
            echo=self.config.logging.echo,
        )

        grid_settings = self.config.grid
        self.grid = GridModel(grid_settings.width, grid_settings.height)
        self.path_finder = PathFinder(self.grid, self.emit_event, self.config.algorithm)
        self.target_finder = SuitableTargetFinder(self.grid.height, self.emit_event)
        self.preset_generator = PresetGenerator(self.config.preset, rng, self.emit_event)
        self.game_speed = GameSpeed(self.config.delay_seconds, self.cancel_token)
        self.scheduler = BattleScheduler(self.emit_event, self.cancel_token)

    def emit_event(self, event: BattleEvent) -> None:
        self.event_manager.publish(event)

    def column_offset(self, side: Side) -> int:
        """x coordinate of a side's first placement column."""
        if side is Side.COMPUTER:
            return 0
        return self.grid.width - self.config.preset.columns

    def generate_army(self, side: Side, max_points: Optional[int] = None) -> Army:
        """Generate an army for a side from the configured unit templates."""
        points = self.config.preset.max_points if max_points is None else max_points
        return self.preset_generator.generate(
            self.config.unit_templates,
            points,
            side=side,
            column_offset=self.column_offset(side),
        )

    def arm(self, army: Army, enemy: Army, side: Side) -> None:
        """Install an AttackProgram on every unit of army."""
        enemy_side = side.opponent
        for unit in army.units:
            unit.program = AttackProgram(
                unit=unit,
                allies=army,
                enemies=enemy,
                target_finder=self.target_finder,
                path_finder=self.path_finder,
                game_speed=self.game_speed,
                side=side,
                enemy_first_column=self.column_offset(enemy_side),
                enemies_on_left=enemy_side is Side.COMPUTER,
            )

    def run(self, player_army: Optional[Army] = None, computer_army: Optional[Army] = None) -> Optional[BattleResult]:
        """Generate any missing army, arm both sides and fight.

        The log is saved to logging.save_dir afterwards when one is configured.

        Raises:
            BattleCancelled: if cancel() is called while the battle runs
        """
        if player_army is None:
            player_army = self.generate_army(Side.PLAYER)
        if computer_army is None:
            computer_army = self.generate_army(Side.COMPUTER)

        self.arm(player_army, computer_army, Side.PLAYER)
        self.arm(computer_army, player_army, Side.COMPUTER)

        self.log_manager.system(
            f"Battle begins: {len(player_army)} player units vs {len(computer_army)} computer units"
        )
        result = self.scheduler.simulate(player_army, computer_army)

        if self.config.logging.save_dir is not None:
            self.log_manager.save_log_to_file(self.config.logging.save_dir)
        return result

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request that the running battle stop at the next turn or pause."""
        self.cancel_token.cancel(reason)

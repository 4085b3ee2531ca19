"""Battle configuration loader.

Loads grid dimensions, path search strategy, pacing, preset generation
settings, logging options and unit templates from a YAML file. A missing
file falls back to built-in defaults; a present but malformed file is an
error.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .data import SearchAlgorithm

DEFAULT_CONFIG_PATH = "assets/config/battle.yaml"

# Front, middle and back: the target finder reads exactly this many columns.
PLACEMENT_COLUMNS = 3


@dataclass
class GridSettings:
    width: int = 27
    height: int = 21


@dataclass
class PresetSettings:
    """Army generation parameters.

    columns is the width of the placement block; its height is the grid
    height. placement_attempts random probes are made per unit, the first
    spread_attempts of which avoid the first placed unit's row.
    """
    max_points: int = 1500
    max_per_type: int = 11
    columns: int = PLACEMENT_COLUMNS
    rows: int = 21
    placement_attempts: int = 300
    spread_attempts: int = 120
    seed: Optional[int] = None


@dataclass
class LogSettings:
    max_messages: int = 1000
    echo: bool = False
    level: str = "INFO"
    save_dir: Optional[str] = None


@dataclass
class UnitTemplate:
    """Stats shared by every combatant generated from this template."""
    unit_type: str
    health: int
    base_attack: int
    cost: int
    attack_type: str = "melee"
    attack_bonuses: dict[str, int] = field(default_factory=dict)
    defence_bonuses: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UnitTemplate":
        """Create a template from a YAML mapping.

        Raises:
            ValueError: if a required key is missing or a value has the wrong type
        """
        try:
            return cls(
                unit_type=str(data["unit_type"]),
                health=int(data["health"]),
                base_attack=int(data["base_attack"]),
                cost=int(data["cost"]),
                attack_type=str(data.get("attack_type", "melee")),
                attack_bonuses={str(k): int(v) for k, v in (data.get("attack_bonuses") or {}).items()},
                defence_bonuses={str(k): int(v) for k, v in (data.get("defence_bonuses") or {}).items()},
            )
        except KeyError as e:
            raise ValueError(f"Unit template is missing required key {e}")
        except (TypeError, ValueError, AttributeError) as e:
            raise ValueError(f"Invalid unit template {data!r}: {e}")


@dataclass
class BattleConfig:
    """Complete battle configuration."""
    grid: GridSettings = field(default_factory=GridSettings)
    algorithm: SearchAlgorithm = SearchAlgorithm.BFS
    delay_seconds: float = 0.0
    preset: PresetSettings = field(default_factory=PresetSettings)
    logging: LogSettings = field(default_factory=LogSettings)
    unit_templates: list[UnitTemplate] = field(default_factory=list)

    @classmethod
    def default(cls) -> "BattleConfig":
        """Configuration used when no file is available."""
        return cls(unit_templates=default_unit_templates())


def default_unit_templates() -> list[UnitTemplate]:
    return [
        UnitTemplate("Archer", 50, 8, 50, "ranged",
                     {"Archer": 0, "Swordsman": 2, "Pikeman": 2, "Knight": 0},
                     {"melee": 0, "ranged": 2}),
        UnitTemplate("Swordsman", 100, 10, 70, "melee",
                     {"Archer": 4, "Swordsman": 0, "Pikeman": 2, "Knight": 0},
                     {"melee": 2, "ranged": 0}),
        UnitTemplate("Pikeman", 80, 12, 90, "melee",
                     {"Archer": 0, "Swordsman": 0, "Pikeman": 0, "Knight": 6},
                     {"melee": 2, "ranged": 0}),
        UnitTemplate("Knight", 160, 20, 180, "melee",
                     {"Archer": 6, "Swordsman": 4, "Pikeman": 0, "Knight": 0},
                     {"melee": 4, "ranged": 4}),
    ]


class BattleConfigLoader:
    """Reads BattleConfig from YAML."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or self._find_default_config_path()

    def _find_default_config_path(self) -> str:
        """Find assets/config/battle.yaml by walking up from this file."""
        current_dir = Path(__file__).parent
        for _ in range(5):
            candidate = current_dir / DEFAULT_CONFIG_PATH
            if candidate.exists():
                return str(candidate)
            current_dir = current_dir.parent

        return DEFAULT_CONFIG_PATH

    def load(self) -> BattleConfig:
        """Load the configuration.

        Returns:
            The parsed configuration, or defaults if the file does not exist

        Raises:
            ValueError: if the file cannot be parsed or holds invalid values
        """
        if not os.path.exists(self.config_path):
            print(f"Warning: Battle config file not found: {self.config_path}, using defaults")
            return BattleConfig.default()

        try:
            with open(self.config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML file {self.config_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Battle config {self.config_path} must be a mapping")

        try:
            return self.parse(data)
        except TypeError as e:
            raise ValueError(f"Invalid value in battle config {self.config_path}: {e}")

    def parse(self, data: dict[str, Any]) -> BattleConfig:
        """Build a BattleConfig from an already loaded mapping."""
        grid_data = data.get("grid") or {}
        grid = GridSettings(
            width=int(grid_data.get("width", GridSettings.width)),
            height=int(grid_data.get("height", GridSettings.height)),
        )
        if grid.width <= 0 or grid.height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {grid.width}x{grid.height}")

        algorithm_name = (data.get("pathfinding") or {}).get("algorithm", SearchAlgorithm.BFS.value)
        try:
            algorithm = SearchAlgorithm(str(algorithm_name).lower())
        except ValueError:
            raise ValueError(f"Unknown pathfinding algorithm '{algorithm_name}'")

        delay_seconds = float((data.get("pacing") or {}).get("delay_seconds", 0.0))
        if delay_seconds < 0:
            raise ValueError(f"Pacing delay must not be negative, got {delay_seconds}")

        preset = self._parse_preset(data.get("preset") or {}, grid)
        log_settings = self._parse_logging(data.get("logging") or {})

        templates_data = data.get("unit_templates")
        if templates_data is None:
            templates = default_unit_templates()
        elif isinstance(templates_data, list):
            templates = [UnitTemplate.from_dict(entry) for entry in templates_data]
        else:
            raise ValueError("unit_templates must be a list")

        return BattleConfig(
            grid=grid,
            algorithm=algorithm,
            delay_seconds=delay_seconds,
            preset=preset,
            logging=log_settings,
            unit_templates=templates,
        )

    def _parse_preset(self, preset_data: dict[str, Any], grid: GridSettings) -> PresetSettings:
        defaults = PresetSettings()
        seed = preset_data.get("seed")
        preset = PresetSettings(
            max_points=int(preset_data.get("max_points", defaults.max_points)),
            max_per_type=int(preset_data.get("max_per_type", defaults.max_per_type)),
            columns=int(preset_data.get("columns", defaults.columns)),
            rows=grid.height,
            placement_attempts=int(preset_data.get("placement_attempts", defaults.placement_attempts)),
            spread_attempts=int(preset_data.get("spread_attempts", defaults.spread_attempts)),
            seed=int(seed) if seed is not None else None,
        )
        if preset.columns != PLACEMENT_COLUMNS:
            raise ValueError(f"Preset columns must be {PLACEMENT_COLUMNS}, got {preset.columns}")
        if 2 * preset.columns > grid.width:
            raise ValueError(f"Grid width {grid.width} cannot fit both armies' placement columns")
        if preset.max_per_type < 0 or preset.placement_attempts < 0 or preset.spread_attempts < 0:
            raise ValueError("Preset limits must not be negative")
        return preset

    def _parse_logging(self, logging_data: dict[str, Any]) -> LogSettings:
        defaults = LogSettings()
        level = str(logging_data.get("level", defaults.level)).upper()
        save_dir = logging_data.get("save_dir")
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"Unknown log level '{level}'")
        return LogSettings(
            max_messages=int(logging_data.get("max_messages", defaults.max_messages)),
            echo=bool(logging_data.get("echo", defaults.echo)),
            level=level,
            save_dir=str(save_dir) if save_dir is not None else None,
        )

"""Game layer: combatants, armies, action programs, logging and session wiring."""

from .battle_session import BattleSession
from .entities import Army, Combatant
from .log_manager import LogCategory, LogLevel, LogManager, LogMessage
from .programs import AttackProgram, GameSpeed, PresetGenerator, SuitableTargetFinder, compute_damage

__all__ = [
    "BattleSession",
    "Army",
    "Combatant",
    "LogCategory",
    "LogLevel",
    "LogManager",
    "LogMessage",
    "AttackProgram",
    "GameSpeed",
    "PresetGenerator",
    "SuitableTargetFinder",
    "compute_damage",
]

"""Action programs and battle collaborators."""

from .attack_program import AttackProgram, compute_damage
from .pacing import GameSpeed
from .preset_generator import PresetGenerator
from .target_finder import SuitableTargetFinder

__all__ = [
    "AttackProgram",
    "compute_damage",
    "GameSpeed",
    "PresetGenerator",
    "SuitableTargetFinder",
]

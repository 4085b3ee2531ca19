"""Core data structures and definitions.

This package contains fundamental data types:
- data_structures.py: Cell coordinates and identity-keyed sets
- game_enums.py: Centralized enums for sides, battle phases and outcomes
"""

from .data_structures import Cell, IdentitySet
from .game_enums import Side, BattlePhase, BattleOutcome, SearchAlgorithm, SIDE_NAMES

__all__ = [
    "Cell",
    "IdentitySet",
    "Side",
    "BattlePhase",
    "BattleOutcome",
    "SearchAlgorithm",
    "SIDE_NAMES",
]

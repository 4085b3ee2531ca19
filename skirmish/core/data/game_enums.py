"""Centralized battle enums.

This module contains the enums shared by the scheduler, the path finder and
the game layer, providing a single source of truth.
"""

from enum import Enum, auto


class Side(Enum):
    """The two opposing armies."""
    PLAYER = 0
    COMPUTER = 1

    @property
    def display_name(self) -> str:
        return SIDE_NAMES[self]

    @property
    def opponent(self) -> "Side":
        return Side.COMPUTER if self is Side.PLAYER else Side.PLAYER


class BattlePhase(Enum):
    """States of the battle scheduler."""
    IDLE = auto()
    ROUND_START = auto()
    ACTING = auto()
    ROUND_END = auto()
    BATTLE_OVER = auto()
    ABORTED = auto()


class BattleOutcome(Enum):
    """Why a battle concluded."""
    SIDE_ELIMINATED = auto()
    STALEMATE = auto()


class SearchAlgorithm(Enum):
    """Shortest path search strategies."""
    BFS = "bfs"
    BIDIRECTIONAL = "bidirectional"


SIDE_NAMES = {
    Side.PLAYER: "Player",
    Side.COMPUTER: "Computer",
}

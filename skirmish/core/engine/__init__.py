"""Core battle engine components.

This package contains the fundamental engine systems:
- grid.py: Fixed-size grid with bounds, adjacency and obstacle masks
- pathfinding.py: Shortest path search (BFS and bidirectional BFS)
- turn_queue.py: Power-ordered per-side turn queues
- battle_scheduler.py: Round/turn state machine
- actions.py: Action program capability consumed by the scheduler
"""

from .actions import ActionProgram, CallbackProgram, IdleProgram
from .battle_scheduler import BattleResult, BattleScheduler, RoundState
from .grid import DEFAULT_HEIGHT, DEFAULT_WIDTH, DIRECTIONS, GridModel
from .pathfinding import PathFinder
from .turn_queue import TurnEntry, TurnQueue, TurnQueueBuilder

__all__ = [
    "ActionProgram",
    "CallbackProgram",
    "IdleProgram",
    "BattleResult",
    "BattleScheduler",
    "RoundState",
    "DEFAULT_HEIGHT",
    "DEFAULT_WIDTH",
    "DIRECTIONS",
    "GridModel",
    "PathFinder",
    "TurnEntry",
    "TurnQueue",
    "TurnQueueBuilder",
]

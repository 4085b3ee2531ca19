"""Event system for publisher-subscriber communication.

This package contains the complete event-driven reporting layer:
- event_manager.py: Publisher-subscriber event routing
- events.py: Event definitions emitted by the engine and game layer
"""

from .event_manager import EventManager, EventSubscriber
from .events import (
    BattleEvent,
    EventType,
    RoundStarted,
    TurnTaken,
    QueueRebuilt,
    UnitDefeated,
    RoundEnded,
    BattleEnded,
    PathUnreachable,
    TargetsUnavailable,
    ArmyGenerated,
)

__all__ = [
    "EventManager",
    "EventSubscriber",
    "BattleEvent",
    "EventType",
    "RoundStarted",
    "TurnTaken",
    "QueueRebuilt",
    "UnitDefeated",
    "RoundEnded",
    "BattleEnded",
    "PathUnreachable",
    "TargetsUnavailable",
    "ArmyGenerated",
]

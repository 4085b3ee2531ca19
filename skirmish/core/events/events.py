"""Battle events and their payloads.

This module defines every event the scheduler, the path finder and the game
layer publish. Subscribers (the log manager, tests, UIs) receive them through
the EventManager or through a plain event_emitter callable.

Event Design Principles:
- Events are immutable dataclasses with rich object payloads
- Events reference combatants directly instead of copying their fields
- Events use proper enums instead of magic strings
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from ..data import BattleOutcome, Cell, Side

if TYPE_CHECKING:
    from ...game.entities.combatant import Combatant


class EventType(Enum):
    """Types of battle events that subscribers can listen to."""
    # Round and turn events
    ROUND_STARTED = auto()
    TURN_TAKEN = auto()
    QUEUE_REBUILT = auto()
    UNIT_DEFEATED = auto()
    ROUND_ENDED = auto()
    BATTLE_ENDED = auto()

    # Targeting events
    PATH_UNREACHABLE = auto()
    TARGETS_UNAVAILABLE = auto()

    # Army composition
    ARMY_GENERATED = auto()


@dataclass(frozen=True)
class BattleEvent(ABC):
    """Base class for all battle events."""
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class RoundStarted(BattleEvent):
    """Event emitted when a new round begins."""
    round_number: int

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, "event_type", EventType.ROUND_STARTED)


@dataclass(frozen=True)
class TurnTaken(BattleEvent):
    """Event emitted after every combatant action.

    target is None when the action produced no target (including actions that
    returned the attacker itself).
    """
    round_number: int
    side: Side
    attacker: "Combatant"
    target: Optional["Combatant"]

    def __post_init__(self):
        object.__setattr__(self, "event_type", EventType.TURN_TAKEN)


@dataclass(frozen=True)
class QueueRebuilt(BattleEvent):
    """Event emitted when a side's turn queue is recomputed mid-round."""
    round_number: int
    side: Side
    queue_size: int

    def __post_init__(self):
        object.__setattr__(self, "event_type", EventType.QUEUE_REBUILT)


@dataclass(frozen=True)
class UnitDefeated(BattleEvent):
    """Event emitted when an action kills its target."""
    round_number: int
    unit: "Combatant"
    side: Optional[Side]
    had_acted: bool

    def __post_init__(self):
        object.__setattr__(self, "event_type", EventType.UNIT_DEFEATED)


@dataclass(frozen=True)
class RoundEnded(BattleEvent):
    """Event emitted with the round summary."""
    round_number: int
    living_counts: dict[Side, int]

    def __post_init__(self):
        object.__setattr__(self, "event_type", EventType.ROUND_ENDED)


@dataclass(frozen=True)
class BattleEnded(BattleEvent):
    """Terminal event emitted once per concluded battle."""
    round_number: int
    outcome: BattleOutcome
    winner: Optional[Side]
    living_counts: dict[Side, int]

    def __post_init__(self):
        object.__setattr__(self, "event_type", EventType.BATTLE_ENDED)


@dataclass(frozen=True)
class PathUnreachable(BattleEvent):
    """Event emitted when a path query finds no route to the goal."""
    start: Cell
    goal: Cell
    attacker: Optional["Combatant"] = None
    target: Optional["Combatant"] = None

    def __post_init__(self):
        object.__setattr__(self, "event_type", EventType.PATH_UNREACHABLE)


@dataclass(frozen=True)
class TargetsUnavailable(BattleEvent):
    """Event emitted when the line-of-sight filter yields no target."""
    reason: str = "no visible targets"

    def __post_init__(self):
        object.__setattr__(self, "event_type", EventType.TARGETS_UNAVAILABLE)


@dataclass(frozen=True)
class ArmyGenerated(BattleEvent):
    """Event emitted when a preset army has been composed."""
    side: Optional[Side]
    units_added: int
    points_used: int

    def __post_init__(self):
        object.__setattr__(self, "event_type", EventType.ARMY_GENERATED)


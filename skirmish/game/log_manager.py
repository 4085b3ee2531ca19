"""
Log management for battle reports and debugging.

This module turns the events published by the scheduler, the path finder,
the target finder and the preset generator into categorized text messages,
stores them in a bounded buffer and optionally mirrors them to stdout.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ..core.data import Side
from ..core.events import (
    ArmyGenerated,
    BattleEnded,
    EventType,
    PathUnreachable,
    QueueRebuilt,
    RoundEnded,
    RoundStarted,
    TargetsUnavailable,
    TurnTaken,
    UnitDefeated,
)

if TYPE_CHECKING:
    from ..core.events import EventManager


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()     # Session setup, configuration, saving
    BATTLE = auto()     # Attacks, defeats, battle result
    ROUND = auto()      # Round summaries
    PATH = auto()       # Path search failures
    TARGETING = auto()  # Target visibility
    PRESET = auto()     # Army generation
    DEBUG = auto()      # Debug messages
    WARNING = auto()    # Warning messages
    ERROR = auto()      # Error messages


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.ROUND: "RND",
    LogCategory.PATH: "PTH",
    LogCategory.TARGETING: "TGT",
    LogCategory.PRESET: "PRS",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


@dataclass
class LogMessage:
    """A single log message with metadata."""
    text: str
    category: LogCategory
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the message for display."""
        parts = []

        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S')}]")

        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")

        parts.append(self.text)
        return " ".join(parts)


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


class LogManager:
    """Collects battle messages with categorization and filtering."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO,
        echo: bool = False,
    ):
        """Initialize the log manager.

        Args:
            event_manager: Event manager to subscribe to (required)
            max_messages: Maximum number of messages kept in the buffer
            default_level: Minimum level of messages returned and echoed
            echo: Whether to print messages to stdout as they arrive
        """
        self.messages: deque[LogMessage] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)
        self.event_manager = event_manager
        self.echo = echo

        # Categories not listed here are INFO
        self.category_levels = {
            LogCategory.DEBUG: LogLevel.DEBUG,
            LogCategory.WARNING: LogLevel.WARNING,
            LogCategory.ERROR: LogLevel.ERROR,
        }

        self._setup_event_subscriptions()

    def _setup_event_subscriptions(self) -> None:
        """Subscribe a handler for every reported event type."""
        handlers = {
            EventType.ROUND_STARTED: self._handle_round_started,
            EventType.TURN_TAKEN: self._handle_turn_taken,
            EventType.QUEUE_REBUILT: self._handle_queue_rebuilt,
            EventType.UNIT_DEFEATED: self._handle_unit_defeated,
            EventType.ROUND_ENDED: self._handle_round_ended,
            EventType.BATTLE_ENDED: self._handle_battle_ended,
            EventType.PATH_UNREACHABLE: self._handle_path_unreachable,
            EventType.TARGETS_UNAVAILABLE: self._handle_targets_unavailable,
            EventType.ARMY_GENERATED: self._handle_army_generated,
        }
        for event_type, handler in handlers.items():
            self.event_manager.subscribe(
                event_type,
                handler,
                subscriber_name=f"LogManager.{event_type.name.lower()}"
            )

    # ============== Event handlers ==============

    def _handle_round_started(self, event) -> None:
        if isinstance(event, RoundStarted):
            self.debug(f"Round {event.round_number} started")

    def _handle_turn_taken(self, event) -> None:
        if isinstance(event, TurnTaken):
            if event.target is None:
                self.battle(f"{event.attacker.name} has no target")
            else:
                self.battle(f"{event.attacker.name} attacks {event.target.name}")

    def _handle_queue_rebuilt(self, event) -> None:
        if isinstance(event, QueueRebuilt):
            self.debug(f"{event.side.display_name} turn queue rebuilt with {event.queue_size} units")

    def _handle_unit_defeated(self, event) -> None:
        if isinstance(event, UnitDefeated):
            self.battle(f"{event.unit.name} is defeated")

    def _handle_round_ended(self, event) -> None:
        if isinstance(event, RoundEnded):
            self.round(f"Round {event.round_number} is over!")
            self.round(f"Player army has {event.living_counts.get(Side.PLAYER, 0)} units")
            self.round(f"Computer army has {event.living_counts.get(Side.COMPUTER, 0)} units")

    def _handle_battle_ended(self, event) -> None:
        if isinstance(event, BattleEnded):
            self.battle("Battle is over!")
            if event.winner is not None:
                self.battle(f"{event.winner.display_name} army wins")
            else:
                self.battle(f"No winner ({event.outcome.name.lower()})")

    def _handle_path_unreachable(self, event) -> None:
        if isinstance(event, PathUnreachable):
            if event.attacker is not None and event.target is not None:
                self.log(
                    f"Unit {event.attacker.name} cannot find path to attack unit {event.target.name}",
                    LogCategory.PATH,
                )
            else:
                self.log(f"No path from {event.start} to {event.goal}", LogCategory.PATH)

    def _handle_targets_unavailable(self, event) -> None:
        if isinstance(event, TargetsUnavailable):
            self.log("Unit can not find target for attack!", LogCategory.TARGETING)

    def _handle_army_generated(self, event) -> None:
        if isinstance(event, ArmyGenerated):
            for index in range(1, event.units_added + 1):
                self.log(f"Added {index} unit", LogCategory.PRESET)
            self.log(f"Used points: {event.points_used}", LogCategory.PRESET)

    # ============== Logging ==============

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM) -> None:
        """Add a message to the log.

        Args:
            text: The message text
            category: The category of the message
        """
        message = LogMessage(text=text, category=category)
        self.messages.append(message)

        if self.echo and self._is_visible(message):
            print(message.text)

    def system(self, text: str) -> None:
        """Log a system message."""
        self.log(text, LogCategory.SYSTEM)

    def battle(self, text: str) -> None:
        """Log a battle message."""
        self.log(text, LogCategory.BATTLE)

    def round(self, text: str) -> None:
        """Log a round summary message."""
        self.log(text, LogCategory.ROUND)

    def debug(self, text: str) -> None:
        """Log a debug message."""
        self.log(text, LogCategory.DEBUG)

    def warning(self, text: str) -> None:
        """Log a warning message."""
        self.log(text, LogCategory.WARNING)

    def error(self, text: str) -> None:
        """Log an error message."""
        self.log(text, LogCategory.ERROR)

    def _is_visible(self, message: LogMessage) -> bool:
        if message.category not in self.enabled_categories:
            return False
        message_level = self.category_levels.get(message.category, LogLevel.INFO)
        return message_level.value >= self.log_level.value

    def get_messages(self, count: Optional[int] = None,
                     categories: Optional[set[LogCategory]] = None) -> list[LogMessage]:
        """Get recent messages, optionally filtered by category.

        Args:
            count: Maximum number of messages to return (None for all)
            categories: Set of categories to include (None for all enabled)

        Returns:
            List of recent messages, oldest first
        """
        if categories:
            filtered = [msg for msg in self.messages
                        if msg.category in categories and msg.category in self.enabled_categories]
        else:
            filtered = [msg for msg in self.messages if self._is_visible(msg)]

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def get_texts(self, categories: Optional[set[LogCategory]] = None) -> list[str]:
        """Plain message texts, as they would be echoed."""
        return [msg.text for msg in self.get_messages(categories=categories)]

    def clear(self) -> None:
        """Clear all messages from the log."""
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        """Set the minimum log level."""
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        """Check if debug messages are currently visible."""
        return (LogCategory.DEBUG in self.enabled_categories and
                self.log_level == LogLevel.DEBUG)

    def save_log_to_file(self, log_dir: str = "logs") -> bool:
        """Save all messages to a timestamped log file.

        Returns:
            True if save was successful, False otherwise
        """
        try:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            os.makedirs(log_dir, exist_ok=True)
            filepath = os.path.join(log_dir, f"battle_{timestamp}.log")

            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Skirmish - Battle Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                else:
                    # Every buffered message, regardless of current filters
                    for msg in self.messages:
                        timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                        f.write(f"[{timestamp_str}] [{msg.category.name}] {msg.text}\n")

            self.system(f"Battle log saved to {filepath}")
            return True

        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return False

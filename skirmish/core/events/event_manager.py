"""
Event management for decoupled battle reporting.

This module provides a central event bus so the scheduler, the path finder
and the army generator can report what happens without knowing who listens,
following the publisher-subscriber pattern. Events are delivered as soon as
they are published, in subscription order.
"""

from collections import defaultdict
from typing import Callable, Optional, TYPE_CHECKING

from ..cancellation import BattleCancelled

if TYPE_CHECKING:
    from .events import BattleEvent, EventType


EventSubscriber = Callable[["BattleEvent"], None]


class EventManager:
    """Central event bus for battle reporting."""

    def __init__(self):
        # Event subscribers by event type, with display names for error reports
        self._subscribers: dict["EventType", list[tuple[EventSubscriber, str]]] = defaultdict(list)

        # (subscriber name, exception) for every failed delivery
        self.subscriber_errors: list[tuple[str, Exception]] = []

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: The type of events to subscribe to
            subscriber: Callback function to handle events
            subscriber_name: Optional name used when the subscriber fails
        """
        name = subscriber_name or getattr(subscriber, "__name__", "anonymous")
        self._subscribers[event_type].append((subscriber, name))

    def subscriber_count(self, event_type: "EventType") -> int:
        return len(self._subscribers.get(event_type, []))

    def publish(self, event: "BattleEvent") -> None:
        """Deliver an event to every subscriber of its type.

        Subscriber errors are recorded so one faulty listener cannot stop the
        battle; BattleCancelled always propagates.
        """
        for subscriber, name in list(self._subscribers.get(event.event_type, [])):
            try:
                subscriber(event)
            except BattleCancelled:
                raise
            except Exception as e:
                self.subscriber_errors.append((name, e))

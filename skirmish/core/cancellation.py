"""Cooperative cancellation for the battle loop.

The scheduler checks the token between turns; pacing delays wait on it so a
cancellation request interrupts a sleeping action callback immediately.
"""

import threading
from typing import Optional


class BattleCancelled(Exception):
    """Raised when a running battle is aborted by an external request."""


class CancellationToken:
    """Thread-safe flag shared between the battle loop and its controller."""

    def __init__(self):
        self._event = threading.Event()
        self.reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation. Idempotent; the first reason wins."""
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise BattleCancelled if cancellation was requested."""
        if self._event.is_set():
            raise BattleCancelled(self.reason or "Battle cancelled")

    def wait(self, timeout: float) -> None:
        """Sleep up to timeout seconds, aborting early on cancellation.

        Raises:
            BattleCancelled: if the token is cancelled before or during the wait
        """
        if timeout > 0:
            self._event.wait(timeout)
        self.raise_if_cancelled()

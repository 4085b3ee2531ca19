"""Battle pacing.

GameSpeed inserts a pause after every action so a battle can be followed as
it happens. The pause waits on the cancellation token, which makes it the
point where a cancelled battle stops.
"""

from typing import Optional

from ...core.cancellation import CancellationToken


class GameSpeed:
    """Configurable delay between actions."""

    def __init__(self, delay_seconds: float = 0.0, cancel_token: Optional[CancellationToken] = None):
        if delay_seconds < 0:
            raise ValueError(f"Delay must not be negative, got {delay_seconds}")
        self.delay_seconds = delay_seconds
        self.cancel_token = cancel_token or CancellationToken()

    def pause(self) -> None:
        """Wait for the configured delay.

        Raises:
            BattleCancelled: if the battle was cancelled before or during the pause
        """
        self.cancel_token.wait(self.delay_seconds)

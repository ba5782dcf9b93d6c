"""
Admission control for provider responses.

The provider's server-side turn detection can start several responses in
quick succession. Only one response is tracked at a time; any response that
starts while another is in flight, or within the cooldown window after the
last accepted one began, must be cancelled by the caller.
"""

import time
from typing import Callable, Optional

from brenda.config.constants import DEFAULT_RESPONSE_COOLDOWN_MS


class ResponseGate:
    """Tracks the current response and decides whether a new one may proceed."""

    def __init__(
        self,
        cooldown_ms: int = DEFAULT_RESPONSE_COOLDOWN_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.cooldown = cooldown_ms / 1000.0
        self._clock = clock
        self.current_response_id: Optional[str] = None
        self.last_response_time: Optional[float] = None

    @property
    def busy(self) -> bool:
        return self.current_response_id is not None

    def admit(self, response_id: str) -> bool:
        """
        Register a newly created response.

        Returns:
            bool: True if the response becomes the current one, False if it must be cancelled
        """
        now = self._clock()
        if self.current_response_id is not None:
            return False
        if self.last_response_time is not None and now - self.last_response_time < self.cooldown:
            return False

        self.current_response_id = response_id
        self.last_response_time = now
        return True

    def complete(self, response_id: Optional[str]) -> bool:
        """
        Mark a response as done.

        Returns:
            bool: True if it was the current response and has been cleared
        """
        if response_id is None or response_id != self.current_response_id:
            return False
        self.current_response_id = None
        return True

    def reset(self) -> None:
        self.current_response_id = None
        self.last_response_time = None

from __future__ import annotations

import time
from typing import Callable, Dict


class ResetConfirmations:
    """Two-step reset: the second press within the timeout confirms.

    Each pending entry stores its own expiry, checked when it is read.
    """

    def __init__(self, timeout_seconds: float = 30, clock: Callable[[], float] = time.monotonic):
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._expires: Dict[str, float] = {}

    def is_pending(self, user_id: str) -> bool:
        expires = self._expires.get(str(user_id))
        if expires is None:
            return False
        if self._clock() >= expires:
            del self._expires[str(user_id)]
            return False
        return True

    def press(self, user_id: str) -> bool:
        """Register a press; return True when it confirms an earlier one."""
        if self.is_pending(user_id):
            del self._expires[str(user_id)]
            return True
        self._expires[str(user_id)] = self._clock() + self.timeout_seconds
        return False

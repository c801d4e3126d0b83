from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int:
        """Current time in whole seconds since the epoch."""
        raise NotImplementedError


class SystemClock:
    """Wall clock.

    Note: Wrapped so services never call time.time() directly; tests inject
    a ManualClock instead.
    """

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: int = 0):
        self._now = int(start)

    def now(self) -> int:
        return self._now

    def set(self, value: int) -> None:
        if int(value) < self._now:
            raise ValueError("ManualClock cannot move backwards")
        self._now = int(value)

    def advance(self, seconds: int) -> int:
        self.set(self._now + int(seconds))
        return self._now

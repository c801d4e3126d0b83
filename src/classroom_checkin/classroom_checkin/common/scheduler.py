"""Cooperative periodic tasks.

Everything runs on the caller's thread: a scheduler only fires callbacks when
``run_pending`` (or ``ManualScheduler.advance``) is called, so no two
callbacks ever interleave.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .clock import Clock, ManualClock

logger = logging.getLogger(__name__)


class PeriodicTask:
    def __init__(self, *, interval: int, callback: Callable[[], None], next_run: int):
        if int(interval) <= 0:
            raise ValueError("interval must be positive")
        self.interval = int(interval)
        self.callback = callback
        self.next_run = int(next_run)
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class CooperativeScheduler:
    def __init__(self, clock: Clock):
        self._clock = clock
        self._tasks: list[PeriodicTask] = []

    @property
    def clock(self) -> Clock:
        return self._clock

    def every(self, interval: int, callback: Callable[[], None]) -> PeriodicTask:
        task = PeriodicTask(interval=interval, callback=callback, next_run=self._clock.now() + int(interval))
        self._tasks.append(task)
        return task

    def pending_count(self) -> int:
        return sum(1 for t in self._tasks if not t.cancelled)

    def next_due(self) -> Optional[int]:
        due = [t.next_run for t in self._tasks if not t.cancelled]
        return min(due) if due else None

    def run_pending(self) -> int:
        """Fire every callback that is due at the current time; returns the number fired."""
        now = self._clock.now()
        fired = 0
        for task in list(self._tasks):
            while not task.cancelled and task.next_run <= now:
                task.next_run += task.interval
                task.callback()
                fired += 1
        self._tasks = [t for t in self._tasks if not t.cancelled]
        return fired


class ManualScheduler(CooperativeScheduler):
    """Deterministic scheduler for tests: moves a ManualClock from one due time to the next."""

    def __init__(self, clock: ManualClock):
        super().__init__(clock)
        self._manual_clock = clock

    def advance(self, seconds: int) -> int:
        target = self._manual_clock.now() + int(seconds)
        fired = 0
        while True:
            due = self.next_due()
            if due is None or due > target:
                break
            self._manual_clock.set(max(due, self._manual_clock.now()))
            fired += self.run_pending()
        self._manual_clock.set(target)
        return fired

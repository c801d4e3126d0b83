from __future__ import annotations

import pytest

from src.classroom_checkin.classroom_checkin.common.clock import ManualClock
from src.classroom_checkin.classroom_checkin.common.scheduler import CooperativeScheduler, ManualScheduler


def test_run_pending_fires_only_due_tasks():
    clock = ManualClock(start=0)
    sched = CooperativeScheduler(clock)
    calls = []
    sched.every(5, lambda: calls.append(clock.now()))

    assert sched.run_pending() == 0
    clock.advance(5)
    assert sched.run_pending() == 1
    # missed intervals are caught up in one call
    clock.advance(10)
    assert sched.run_pending() == 2
    assert calls == [5, 15, 15]


def test_manual_scheduler_steps_clock_to_each_due_time():
    sched = ManualScheduler(ManualClock(start=100))
    seen = []
    sched.every(1, lambda: seen.append(sched.clock.now()))

    assert sched.advance(3) == 3
    assert seen == [101, 102, 103]
    assert sched.clock.now() == 103


def test_cancelled_task_is_dropped():
    sched = ManualScheduler(ManualClock())
    task = sched.every(1, lambda: None)
    task.cancel()

    assert sched.advance(10) == 0
    assert sched.pending_count() == 0
    assert sched.next_due() is None


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        CooperativeScheduler(ManualClock()).every(0, lambda: None)


def test_manual_clock_never_moves_backwards():
    clock = ManualClock(start=10)
    with pytest.raises(ValueError):
        clock.set(9)

from __future__ import annotations

from src.classroom_checkin.classroom_checkin.tokens.rotation import TokenRotationController
from src.classroom_checkin.classroom_checkin.tokens.validator import Accept, TokenValidator


def test_start_issues_token_now(scheduler, clock):
    ctl = TokenRotationController(scheduler)
    token = ctl.start("sess_1", "c1")

    assert token.issue_time == clock.now()
    assert token.validity_window == 65
    assert ctl.running
    assert ctl.seconds_to_rotation == 60
    assert scheduler.pending_count() == 1


def test_rotates_every_period(scheduler, clock):
    issued = []
    ctl = TokenRotationController(scheduler)
    ctl.subscribe(issued.append)
    ctl.start("sess_1", "c1")
    t0 = clock.now()

    scheduler.advance(59)
    assert len(issued) == 1

    scheduler.advance(1)
    assert len(issued) == 2
    assert ctl.current_token.issue_time == t0 + 60

    scheduler.advance(120)
    assert len(issued) == 4


def test_previous_token_accepted_during_grace(scheduler, clock):
    ctl = TokenRotationController(scheduler)
    ctl.start("sess_1", "c1")
    t0 = clock.now()
    first = ctl.current_payload

    scheduler.advance(60)
    second = ctl.current_payload
    assert first != second

    scheduler.advance(3)
    v = TokenValidator()
    assert isinstance(v.validate(first, clock.now(), "sess_1"), Accept)
    assert isinstance(v.validate(second, clock.now(), "sess_1"), Accept)

    assert isinstance(v.validate(first, t0 + 65, "sess_1"), Accept)
    assert not v.validate(first, t0 + 66, "sess_1").accepted


def test_regenerate_issues_at_once_and_resets_countdown(scheduler, clock):
    ctl = TokenRotationController(scheduler)
    ctl.start("sess_1", "c1")
    scheduler.advance(40)

    token = ctl.regenerate()

    assert token.issue_time == clock.now()
    assert ctl.seconds_to_rotation == 60
    assert scheduler.pending_count() == 1


def test_stop_cancels_timer(scheduler):
    issued = []
    ctl = TokenRotationController(scheduler)
    ctl.subscribe(issued.append)
    ctl.start("sess_1", "c1")

    ctl.stop()
    scheduler.advance(300)

    assert len(issued) == 1
    assert not ctl.running
    assert ctl.current_token is None
    assert scheduler.pending_count() == 0


def test_tick_after_stop_is_noop(scheduler):
    ctl = TokenRotationController(scheduler)
    ctl.start("sess_1", "c1")
    ctl.stop()

    assert ctl.tick() is None
    assert ctl.regenerate() is None
    assert ctl.current_payload is None


def test_custom_periods(scheduler):
    ctl = TokenRotationController(scheduler, rotation_period=10, grace=2, timer_interval=5)
    ctl.start("sess_1", "c1")
    first = ctl.current_token

    scheduler.advance(5)
    assert ctl.current_token == first
    scheduler.advance(5)
    assert ctl.current_token != first
    assert ctl.current_token.validity_window == 12

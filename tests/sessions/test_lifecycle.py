from __future__ import annotations

from src.classroom_checkin.classroom_checkin.attendance.ledger import AttendanceLedger
from src.classroom_checkin.classroom_checkin.sessions.lifecycle import SessionLifecycle
from src.classroom_checkin.classroom_checkin.sessions.model import AttendanceSession
from src.classroom_checkin.classroom_checkin.storage.store import AppStore


def _lifecycle(store: AppStore, scheduler) -> SessionLifecycle:
    return SessionLifecycle(store, AttendanceLedger(store), scheduler)


def test_open_creates_session_and_starts_rotation(scheduler, clock):
    store = AppStore()
    lc = _lifecycle(store, scheduler)

    session = lc.open("c1", "t1")

    assert session.is_open
    assert session.open_time == clock.now()
    assert store.sessions == [session]
    assert lc.current_token(session.session_id).session_id == session.session_id
    assert scheduler.pending_count() == 1


def test_close_is_terminal_and_stops_rotation(scheduler, clock):
    store = AppStore()
    lc = _lifecycle(store, scheduler)
    session = lc.open("c1", "t1")

    scheduler.advance(30)
    closed = lc.close(session.session_id)

    assert closed.close_time == clock.now()
    assert not lc.is_open(session.session_id)
    assert scheduler.pending_count() == 0
    assert lc.current_token(session.session_id) is None
    assert lc.regenerate(session.session_id) is None

    scheduler.advance(30)
    assert lc.close(session.session_id) == closed


def test_close_unknown_session(scheduler):
    assert _lifecycle(AppStore(), scheduler).close("nope") is None


def test_each_open_is_a_new_session(scheduler):
    lc = _lifecycle(AppStore(), scheduler)
    a = lc.open("c1", "t1")
    lc.close(a.session_id)
    b = lc.open("c1", "t1")

    assert a.session_id != b.session_id
    assert lc.open_session_for_course("c1") == b
    assert lc.open_session_for_instructor("t1") == b


def test_discard_removes_session_and_records(scheduler):
    store = AppStore()
    ledger = AttendanceLedger(store)
    lc = SessionLifecycle(store, ledger, scheduler)
    session = lc.open("c1", "t1")
    ledger.record(session.session_id, "s1", "c1", 1)

    assert lc.discard(session.session_id) == 1
    assert store.sessions == []
    assert store.records == []
    assert scheduler.pending_count() == 0


def test_open_session_from_storage_resumes_rotation(scheduler, clock):
    stored = AttendanceSession("sess_saved", "c1", "t1", clock.now() - 500)
    store = AppStore(sessions=[stored])
    lc = _lifecycle(store, scheduler)

    token = lc.current_token("sess_saved")

    assert token.issue_time == clock.now()
    assert token.course_id == "c1"
    assert scheduler.pending_count() == 1

from __future__ import annotations

import pytest

from src.classroom_checkin.classroom_checkin.core.enums import CheckinOutcome, RecordOutcome
from src.classroom_checkin.classroom_checkin.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    SessionStateError,
    ValidationError,
)


def test_scan_flow_across_rotation(container, scheduler, teacher):
    session = container.session_service.start_session(teacher, "c1")
    first = container.session_service.token_view(teacher, session.session_id).payload

    scheduler.advance(10)
    result = container.checkin_service.scan("s1", first)
    assert result.outcome == CheckinOutcome.RECORDED
    assert result.success
    assert result.session_id == session.session_id

    assert container.checkin_service.scan("s1", first).outcome == CheckinOutcome.DUPLICATE

    scheduler.advance(52)
    second = container.session_service.token_view(teacher, session.session_id).payload
    assert second != first

    # t = 62: old code still inside its grace window
    assert container.checkin_service.scan("s2", first).outcome == CheckinOutcome.RECORDED

    scheduler.advance(4)
    # t = 66: old code expired, new one fine
    assert container.checkin_service.scan("s3", first).outcome == CheckinOutcome.EXPIRED
    assert container.checkin_service.scan("s3", second).outcome == CheckinOutcome.RECORDED

    records = container.checkin_service.live_records(session.session_id)
    assert [r.subject_id for r in records] == ["s3", "s2", "s1"]


def test_scan_malformed(container):
    result = container.checkin_service.scan("s1", "hello")

    assert result.outcome == CheckinOutcome.MALFORMED
    assert not result.success
    assert result.message


def test_scan_after_session_closed_is_mismatch(container, teacher):
    session = container.session_service.start_session(teacher, "c1")
    payload = container.session_service.token_view(teacher, session.session_id).payload
    container.session_service.end_session(teacher, session.session_id)

    assert container.checkin_service.scan("s1", payload).outcome == CheckinOutcome.SESSION_MISMATCH


def test_scan_with_explicit_expected_session(container, teacher):
    session = container.session_service.start_session(teacher, "c1")
    payload = container.session_service.token_view(teacher, session.session_id).payload

    result = container.checkin_service.scan("s1", payload, expected_session_id="sess_other")

    assert result.outcome == CheckinOutcome.SESSION_MISMATCH
    assert container.ledger.records_for(session.session_id) == []


def test_manual_entry(container, teacher):
    session = container.session_service.start_session(teacher, "c1")
    svc = container.checkin_service

    assert svc.manual_entry(teacher, session.session_id, " s1 ") == RecordOutcome.OK
    assert svc.manual_entry(teacher, session.session_id, "s1") == RecordOutcome.DUPLICATE
    assert container.ledger.find(session.session_id, "s1") is not None


def test_manual_entry_rules(container, teacher, other_teacher):
    session = container.session_service.start_session(teacher, "c1")
    svc = container.checkin_service

    with pytest.raises(ValidationError):
        svc.manual_entry(teacher, session.session_id, "")
    with pytest.raises(ValidationError):
        svc.manual_entry(teacher, session.session_id, "t2")
    with pytest.raises(ValidationError):
        svc.manual_entry(teacher, session.session_id, "nobody")
    with pytest.raises(NotFoundError):
        svc.manual_entry(teacher, "sess_missing", "s1")
    with pytest.raises(AuthorizationError):
        svc.manual_entry(other_teacher, session.session_id, "s1")

    container.session_service.end_session(teacher, session.session_id)
    with pytest.raises(SessionStateError):
        svc.manual_entry(teacher, session.session_id, "s1")


def test_scan_then_manual_entry_is_duplicate(container, teacher):
    session = container.session_service.start_session(teacher, "c1")
    payload = container.session_service.token_view(teacher, session.session_id).payload

    assert container.checkin_service.scan("s1", payload).outcome == CheckinOutcome.RECORDED
    assert container.checkin_service.manual_entry(teacher, session.session_id, "s1") == RecordOutcome.DUPLICATE
    assert len(container.ledger.records_for(session.session_id)) == 1


def test_manual_entry_then_scan_is_duplicate(container, teacher):
    session = container.session_service.start_session(teacher, "c1")
    payload = container.session_service.token_view(teacher, session.session_id).payload

    assert container.checkin_service.manual_entry(teacher, session.session_id, "s1") == RecordOutcome.OK
    assert container.checkin_service.scan("s1", payload).outcome == CheckinOutcome.DUPLICATE


def test_scan_accepts_raw_bytes(container, teacher):
    session = container.session_service.start_session(teacher, "c1")
    payload = container.session_service.token_view(teacher, session.session_id).payload

    assert container.checkin_service.scan("s1", payload.encode("utf-8")).outcome == CheckinOutcome.RECORDED
    assert container.checkin_service.scan("s2", b"\xff\xfe\x00").outcome == CheckinOutcome.MALFORMED


def test_scan_deeply_nested_payload_is_malformed(container):
    result = container.checkin_service.scan("s1", "[" * 100000 + "]" * 100000)

    assert result.outcome == CheckinOutcome.MALFORMED

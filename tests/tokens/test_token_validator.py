from __future__ import annotations

import pytest

from src.classroom_checkin.classroom_checkin.core.enums import RejectReason
from src.classroom_checkin.classroom_checkin.tokens.codec import TokenCodec
from src.classroom_checkin.classroom_checkin.tokens.validator import Accept, Reject, TokenValidator


@pytest.fixture
def payload() -> str:
    return TokenCodec().encode("sess_1", "c1", 1000, 65)


def test_accepts_fresh_token_for_open_session(payload):
    result = TokenValidator().validate(payload, 1010, "sess_1")

    assert result == Accept(session_id="sess_1", course_id="c1")
    assert result.accepted


def test_expiry_boundary_is_inclusive(payload):
    v = TokenValidator()

    assert isinstance(v.validate(payload, 1065, "sess_1"), Accept)
    assert v.validate(payload, 1066, "sess_1") == Reject(RejectReason.EXPIRED)


def test_future_token_counts_as_expired(payload):
    assert TokenValidator().validate(payload, 999, "sess_1") == Reject(RejectReason.EXPIRED)


def test_malformed_payload():
    result = TokenValidator().validate("garbage", 1000, "sess_1")

    assert result == Reject(RejectReason.MALFORMED)
    assert not result.accepted


def test_session_mismatch(payload):
    assert TokenValidator().validate(payload, 1000, "sess_2") == Reject(RejectReason.SESSION_MISMATCH)


def test_no_open_session_is_a_mismatch(payload):
    assert TokenValidator().validate(payload, 1000, None) == Reject(RejectReason.SESSION_MISMATCH)


def test_expiry_is_checked_before_session(payload):
    assert TokenValidator().validate(payload, 2000, "other") == Reject(RejectReason.EXPIRED)


def test_same_inputs_same_result(payload):
    v = TokenValidator()

    assert v.validate(payload, 1030, "sess_1") == v.validate(payload, 1030, "sess_1")


def test_deeply_nested_payload_is_malformed():
    nested = "[" * 100000 + "]" * 100000

    assert TokenValidator().validate(nested, 1000, "sess_1") == Reject(RejectReason.MALFORMED)

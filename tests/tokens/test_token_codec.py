from __future__ import annotations

import json

import pytest

from src.classroom_checkin.classroom_checkin.core.exceptions import DecodeError
from src.classroom_checkin.classroom_checkin.tokens.codec import TokenCodec
from src.classroom_checkin.classroom_checkin.tokens.model import CheckinToken


def test_encode_is_compact_json_with_four_fields():
    payload = TokenCodec().encode("sess_1", "c1", 1000, 65)

    assert " " not in payload
    assert json.loads(payload) == {"sessionId": "sess_1", "courseId": "c1", "issueTime": 1000, "validityWindow": 65}


def test_decode_returns_token():
    codec = TokenCodec()
    token = codec.decode(codec.encode("sess_1", "c1", 1000, 65))

    assert token == CheckinToken("sess_1", "c1", 1000, 65)
    assert token.expires_at == 1065


def test_decode_accepts_bytes():
    assert TokenCodec().decode(b'{"sessionId":"a","courseId":"b","issueTime":1,"validityWindow":2}').course_id == "b"


@pytest.mark.parametrize(
    "payload",
    [
        "",
        "not json",
        "[1, 2]",
        '"text"',
        '{"courseId":"c1","issueTime":1,"validityWindow":65}',
        '{"sessionId":"","courseId":"c1","issueTime":1,"validityWindow":65}',
        '{"sessionId":7,"courseId":"c1","issueTime":1,"validityWindow":65}',
        '{"sessionId":"s","courseId":"c1","issueTime":"1","validityWindow":65}',
        '{"sessionId":"s","courseId":"c1","issueTime":1.5,"validityWindow":65}',
        '{"sessionId":"s","courseId":"c1","issueTime":true,"validityWindow":65}',
        '{"sessionId":"s","courseId":"c1","issueTime":1,"validityWindow":0}',
        '{"sessionId":"s","courseId":"c1","issueTime":1,"validityWindow":-5}',
        "[" * 100000 + "]" * 100000,
    ],
)
def test_decode_rejects_bad_payloads(payload):
    with pytest.raises(DecodeError):
        TokenCodec().decode(payload)


def test_decode_rejects_invalid_utf8():
    with pytest.raises(DecodeError):
        TokenCodec().decode(b"\xff\xfe")


def test_token_validity_is_closed_interval():
    token = CheckinToken("s", "c", 100, 65)

    assert token.is_valid_at(100)
    assert token.is_valid_at(165)
    assert not token.is_valid_at(166)
    assert not token.is_valid_at(99)
    assert token.seconds_left(160) == 5

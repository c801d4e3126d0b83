"""Token payload codec.

Payloads are compact JSON objects with exactly four fields:
``sessionId`` and ``courseId`` (strings), ``issueTime`` and ``validityWindow``
(integer seconds). Nothing is signed.
"""

from __future__ import annotations

import json

from ..core.exceptions import DecodeError
from .model import CheckinToken

_STRING_FIELDS = ("sessionId", "courseId")
_INT_FIELDS = ("issueTime", "validityWindow")


class TokenCodec:
    def encode(self, session_id: str, course_id: str, issue_time: int, validity_window: int) -> str:
        return json.dumps(
            {
                "sessionId": session_id,
                "courseId": course_id,
                "issueTime": int(issue_time),
                "validityWindow": int(validity_window),
            },
            separators=(",", ":"),
        )

    def encode_token(self, token: CheckinToken) -> str:
        return self.encode(token.session_id, token.course_id, token.issue_time, token.validity_window)

    def decode(self, payload: str | bytes) -> CheckinToken:
        if isinstance(payload, bytes):
            try:
                payload = payload.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError("payload is not UTF-8 text") from e
        if not isinstance(payload, str):
            raise DecodeError("payload must be text")

        try:
            data = json.loads(payload)
        except (ValueError, RecursionError) as e:
            # deeply nested input exhausts the decoder stack
            raise DecodeError("payload is not valid JSON") from e

        if not isinstance(data, dict):
            raise DecodeError("payload is not a JSON object")

        for field in _STRING_FIELDS + _INT_FIELDS:
            if field not in data:
                raise DecodeError(f"missing field {field}")

        for field in _STRING_FIELDS:
            value = data[field]
            if not isinstance(value, str) or not value:
                raise DecodeError(f"{field} must be a non-empty string")

        for field in _INT_FIELDS:
            value = data[field]
            # bool is an int subclass; true/false are not timestamps
            if isinstance(value, bool) or not isinstance(value, int):
                raise DecodeError(f"{field} must be an integer")

        if data["validityWindow"] <= 0:
            raise DecodeError("validityWindow must be positive")

        return CheckinToken(
            session_id=data["sessionId"],
            course_id=data["courseId"],
            issue_time=data["issueTime"],
            validity_window=data["validityWindow"],
        )

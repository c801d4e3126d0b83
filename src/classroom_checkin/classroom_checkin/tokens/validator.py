from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..core.enums import RejectReason
from ..core.exceptions import DecodeError
from .codec import TokenCodec


@dataclass(frozen=True)
class Accept:
    session_id: str
    course_id: str

    accepted = True


@dataclass(frozen=True)
class Reject:
    reason: RejectReason

    accepted = False


ValidationResult = Union[Accept, Reject]


class TokenValidator:
    """Decide whether a scanned payload may be used to check in.

    Stateless: the result depends only on the payload, ``now`` and the session
    the scanning context expects. Every path returns a result, nothing raises.
    """

    def __init__(self, codec: TokenCodec | None = None):
        self._codec = codec or TokenCodec()

    def validate(self, payload: str | bytes, now: int, known_open_session_id: Optional[str]) -> ValidationResult:
        try:
            token = self._codec.decode(payload)
        except DecodeError:
            return Reject(RejectReason.MALFORMED)

        # a token from the future (clock skew) is treated as stale
        if not token.is_valid_at(now):
            return Reject(RejectReason.EXPIRED)

        if known_open_session_id is None or token.session_id != known_open_session_id:
            return Reject(RejectReason.SESSION_MISMATCH)

        return Accept(session_id=token.session_id, course_id=token.course_id)

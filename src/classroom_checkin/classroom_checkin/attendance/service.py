from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..common.clock import Clock
from ..common.validators import require_non_empty
from ..core.enums import CheckinOutcome, RecordOutcome, RejectReason, Role
from ..core.exceptions import AuthorizationError, DecodeError, NotFoundError, SessionStateError, ValidationError
from ..sessions.lifecycle import SessionLifecycle
from ..storage.store import AppStore
from ..tokens.codec import TokenCodec
from ..tokens.validator import Reject, TokenValidator
from ..users.model import SessionUser
from ..users.service import UserService
from .ledger import AttendanceLedger
from .model import AttendanceRecord

logger = logging.getLogger(__name__)

_MESSAGES = {
    CheckinOutcome.RECORDED: "Checked in",
    CheckinOutcome.DUPLICATE: "You have already checked in to this session",
    CheckinOutcome.MALFORMED: "Invalid code, please rescan",
    CheckinOutcome.EXPIRED: "This code has expired, please scan the new one",
    CheckinOutcome.SESSION_MISMATCH: "This code does not belong to an open session",
}

_REJECTIONS = {
    RejectReason.MALFORMED: CheckinOutcome.MALFORMED,
    RejectReason.EXPIRED: CheckinOutcome.EXPIRED,
    RejectReason.SESSION_MISMATCH: CheckinOutcome.SESSION_MISMATCH,
}


@dataclass(frozen=True)
class CheckinResult:
    outcome: CheckinOutcome
    message: str
    session_id: Optional[str] = None
    course_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome == CheckinOutcome.RECORDED


class CheckinService:
    """Use case: learners check in by scanning, instructors add learners by hand."""

    def __init__(
        self,
        store: AppStore,
        ledger: AttendanceLedger,
        lifecycle: SessionLifecycle,
        clock: Clock,
        users: UserService,
        *,
        validator: TokenValidator | None = None,
        codec: TokenCodec | None = None,
    ):
        self._store = store
        self._ledger = ledger
        self._lifecycle = lifecycle
        self._clock = clock
        self._users = users
        self._codec = codec or TokenCodec()
        self._validator = validator or TokenValidator(self._codec)

    def scan(self, subject_id: str, payload: str | bytes, *, expected_session_id: Optional[str] = None) -> CheckinResult:
        now = self._clock.now()
        if expected_session_id is None:
            expected_session_id = self._expected_session(payload)

        result = self._validator.validate(payload, now, expected_session_id)
        if isinstance(result, Reject):
            outcome = _REJECTIONS[result.reason]
            logger.info("check-in rejected for %s: %s", subject_id, result.reason.value)
            return CheckinResult(outcome=outcome, message=_MESSAGES[outcome])

        recorded = self._ledger.record(result.session_id, subject_id, result.course_id, now)
        outcome = CheckinOutcome.RECORDED if recorded == RecordOutcome.OK else CheckinOutcome.DUPLICATE
        return CheckinResult(
            outcome=outcome,
            message=_MESSAGES[outcome],
            session_id=result.session_id,
            course_id=result.course_id,
        )

    def manual_entry(self, current_user: SessionUser, session_id: str, subject_id: str) -> RecordOutcome:
        subject_id = require_non_empty(subject_id, "Learner ID")

        session = self._store.find_session(session_id)
        if not session:
            raise NotFoundError("Session not found")
        if current_user.role != Role.INSTRUCTOR or session.instructor_id != current_user.username:
            raise AuthorizationError("You do not have permission")
        if not session.is_open:
            raise SessionStateError("Session is closed")

        if not self._users.learner_exists(subject_id):
            raise ValidationError("No learner with this ID")

        return self._ledger.record(session.session_id, subject_id, session.course_id, self._clock.now())

    def live_records(self, session_id: str) -> list[AttendanceRecord]:
        return self._ledger.records_for(session_id)

    def _expected_session(self, payload: str | bytes) -> Optional[str]:
        # The scanning context expects the open session of the token's course.
        try:
            token = self._codec.decode(payload)
        except DecodeError:
            return None
        session = self._lifecycle.open_session_for_course(token.course_id)
        return session.session_id if session else None

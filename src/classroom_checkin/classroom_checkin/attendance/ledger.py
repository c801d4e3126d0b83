from __future__ import annotations

import logging
import uuid
from fractions import Fraction
from typing import Iterable, Sequence

from ..core.enums import RecordOutcome
from ..storage.store import AppStore
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


def new_record_id() -> str:
    return f"rec_{uuid.uuid4().hex}"


class AttendanceLedger:
    """Authoritative collection of attendance records.

    Invariant: at most one record per (session_id, subject_id). ``record`` is
    the only insert path, for scanned and manual check-ins alike.
    """

    def __init__(self, store: AppStore):
        self._store = store

    def find(self, session_id: str, subject_id: str) -> AttendanceRecord | None:
        return next(
            (r for r in self._store.records if r.session_id == session_id and r.subject_id == subject_id),
            None,
        )

    def record(self, session_id: str, subject_id: str, course_id: str, time: int) -> RecordOutcome:
        if self.find(session_id, subject_id) is not None:
            logger.info("duplicate check-in ignored: session=%s subject=%s", session_id, subject_id)
            return RecordOutcome.DUPLICATE

        rec = AttendanceRecord(
            record_id=new_record_id(),
            subject_id=subject_id,
            course_id=course_id,
            session_id=session_id,
            recorded_at=int(time),
        )
        self._store.records.insert(0, rec)
        self._store.mark_dirty()
        logger.info("recorded check-in: session=%s subject=%s", session_id, subject_id)
        return RecordOutcome.OK

    def records_for(self, session_id: str) -> list[AttendanceRecord]:
        """Records of one session, most recent first."""
        items = [r for r in self._store.records if r.session_id == session_id]
        # stable sort keeps newer inserts (front of the list) first on ties
        return sorted(items, key=lambda r: r.recorded_at, reverse=True)

    def records_for_subject(self, subject_id: str) -> list[AttendanceRecord]:
        return [r for r in self._store.records if r.subject_id == subject_id]

    def records_for_courses(self, course_ids: Iterable[str]) -> list[AttendanceRecord]:
        wanted = set(course_ids)
        return [r for r in self._store.records if r.course_id in wanted]

    def delete_by_session(self, session_id: str) -> int:
        return self._delete_where(lambda r: r.session_id == session_id)

    def delete_by_course(self, course_id: str) -> int:
        return self._delete_where(lambda r: r.course_id == course_id)

    def attendance_ratio(self, subject_id: str, course_ids: Sequence[str]) -> Fraction:
        """Attended sessions / all sessions across ``course_ids``; 0 when there are none."""
        wanted = set(course_ids)
        session_ids = {s.session_id for s in self._store.sessions if s.course_id in wanted}
        if not session_ids:
            return Fraction(0)

        attended = {
            r.session_id
            for r in self._store.records
            if r.subject_id == subject_id and r.session_id in session_ids
        }
        return Fraction(len(attended), len(session_ids))

    def _delete_where(self, predicate) -> int:
        before = len(self._store.records)
        self._store.records[:] = [r for r in self._store.records if not predicate(r)]
        removed = before - len(self._store.records)
        if removed:
            self._store.mark_dirty()
        return removed

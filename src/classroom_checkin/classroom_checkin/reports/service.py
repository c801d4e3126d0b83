from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional

from ..attendance.ledger import AttendanceLedger
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import format_date, format_time
from ..core.constants import CSV_HEADERS
from ..core.enums import Role
from ..courses.model import Course
from ..sessions.model import AttendanceSession
from ..storage.store import AppStore
from ..users.model import SessionUser


@dataclass(frozen=True)
class VisibleData:
    courses: list[Course]
    sessions: list[AttendanceSession]
    records: list[AttendanceRecord]


@dataclass(frozen=True)
class AttendanceStat:
    username: str
    full_name: str
    attended: int
    total: int
    ratio: Fraction

    @property
    def percentage(self) -> int:
        return round(float(self.ratio) * 100)


@dataclass(frozen=True)
class AdminOverview:
    total_accounts: int
    role_counts: dict[Role, int]
    learners: list[AttendanceStat]


class HistoryService:
    """Read models for the history, statistics and export screens."""

    def __init__(self, store: AppStore, ledger: AttendanceLedger):
        self._store = store
        self._ledger = ledger

    def visible_data(self, current_user: SessionUser) -> VisibleData:
        s = self._store
        if current_user.role == Role.ADMIN:
            return VisibleData(list(s.courses), list(s.sessions), list(s.records))

        if current_user.role == Role.INSTRUCTOR:
            courses = [c for c in s.courses if c.instructor_id == current_user.username]
            course_ids = {c.course_id for c in courses}
            return VisibleData(
                courses=courses,
                sessions=[x for x in s.sessions if x.instructor_id == current_user.username],
                records=self._ledger.records_for_courses(course_ids),
            )

        if current_user.role == Role.LEARNER:
            return VisibleData(
                courses=[],
                sessions=list(s.sessions),
                records=self._ledger.records_for_subject(current_user.username),
            )

        raise ValueError(f"unhandled role {current_user.role!r}")

    def relevant_sessions(self, current_user: SessionUser, *, course_id: Optional[str] = None) -> list[AttendanceSession]:
        data = self.visible_data(current_user)
        sessions = data.sessions
        if current_user.role == Role.LEARNER:
            attended = {r.session_id for r in data.records}
            sessions = [x for x in sessions if x.session_id in attended]

        if course_id:
            sessions = [x for x in sessions if x.course_id == course_id]
        return sorted(sessions, key=lambda x: x.open_time, reverse=True)

    def session_records(self, current_user: SessionUser, session_id: str) -> list[AttendanceRecord]:
        visible = self.visible_data(current_user).records
        return sorted(
            (r for r in visible if r.session_id == session_id),
            key=lambda r: r.recorded_at,
            reverse=True,
        )

    def learner_summary(self, username: str) -> AttendanceStat:
        records = self._ledger.records_for_subject(username)
        course_ids = sorted({r.course_id for r in records})
        return self._stat(username, course_ids)

    def admin_overview(self) -> AdminOverview:
        """Account counts per role and the attendance summary of every learner."""
        accounts = self._store.accounts
        learners = sorted(a.username for a in accounts if a.role == Role.LEARNER)
        return AdminOverview(
            total_accounts=len(accounts),
            role_counts={role: sum(1 for a in accounts if a.role == role) for role in Role},
            learners=[self.learner_summary(username) for username in learners],
        )

    def instructor_stats(self, instructor_id: str) -> list[AttendanceStat]:
        course_ids = [c.course_id for c in self._store.courses if c.instructor_id == instructor_id]
        if not any(x.course_id in course_ids for x in self._store.sessions):
            return []

        learners = {r.subject_id for r in self._ledger.records_for_courses(course_ids)}
        return [self._stat(username, course_ids) for username in sorted(learners)]

    def export_csv(self, current_user: SessionUser, *, course_id: Optional[str] = None) -> bytes:
        names = {c.course_id: c.name for c in self._store.courses}
        visible = self.visible_data(current_user).records

        out = io.StringIO()
        writer = csv.writer(out)
        writer.writerow(CSV_HEADERS)
        for session in self.relevant_sessions(current_user, course_id=course_id):
            for r in visible:
                if r.session_id != session.session_id:
                    continue
                writer.writerow(
                    [
                        format_date(session.open_time),
                        names.get(session.course_id, "-"),
                        r.subject_id,
                        format_time(r.recorded_at),
                    ]
                )

        return out.getvalue().encode("utf-8-sig")

    def _stat(self, username: str, course_ids: list[str]) -> AttendanceStat:
        wanted = set(course_ids)
        total = sum(1 for x in self._store.sessions if x.course_id in wanted)
        ratio = self._ledger.attendance_ratio(username, course_ids)
        account = self._store.find_account(username)
        return AttendanceStat(
            username=username,
            full_name=account.full_name if account else username,
            attended=int(ratio * total),
            total=total,
            ratio=ratio,
        )

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..courses.model import Course
from ..sessions.model import AttendanceSession
from ..users.model import Account


@dataclass
class AppStore:
    """Process-wide state, created at start-up and shared through the container.

    Lists are mutated in place only by the services that own them:
    SessionLifecycle (sessions), AttendanceLedger (records), CourseService
    (courses) and UserService (accounts).
    """

    accounts: list[Account] = field(default_factory=list)
    courses: list[Course] = field(default_factory=list)
    sessions: list[AttendanceSession] = field(default_factory=list)
    records: list[AttendanceRecord] = field(default_factory=list)
    dirty: bool = False

    def find_account(self, username: str) -> Optional[Account]:
        return next((a for a in self.accounts if a.username == username), None)

    def find_course(self, course_id: str) -> Optional[Course]:
        return next((c for c in self.courses if c.course_id == course_id), None)

    def find_session(self, session_id: str) -> Optional[AttendanceSession]:
        return next((s for s in self.sessions if s.session_id == session_id), None)

    def replace_session(self, session: AttendanceSession) -> None:
        for i, s in enumerate(self.sessions):
            if s.session_id == session.session_id:
                self.sessions[i] = session
                return
        raise KeyError(session.session_id)

    def mark_dirty(self) -> None:
        self.dirty = True

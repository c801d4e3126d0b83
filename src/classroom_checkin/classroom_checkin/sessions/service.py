from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, SessionStateError
from ..courses.service import CourseService
from ..storage.store import AppStore
from ..users.model import SessionUser
from .lifecycle import SessionLifecycle
from .model import AttendanceSession


@dataclass(frozen=True)
class TokenView:
    """What the live-session screen needs to draw the current code."""

    session_id: str
    payload: str
    issue_time: int
    validity_window: int
    seconds_left: int
    seconds_to_rotation: int


class SessionService:
    def __init__(self, store: AppStore, lifecycle: SessionLifecycle, courses: CourseService):
        self._store = store
        self._lifecycle = lifecycle
        self._courses = courses

    def get(self, session_id: str) -> AttendanceSession:
        session = self._store.find_session(session_id)
        if not session:
            raise NotFoundError("Session not found")
        return session

    def active_session_for(self, instructor_id: str) -> Optional[AttendanceSession]:
        return self._lifecycle.open_session_for_instructor(instructor_id)

    def start_session(self, current_user: SessionUser, course_id: str) -> AttendanceSession:
        if current_user.role != Role.INSTRUCTOR:
            raise AuthorizationError("Only instructors can start a session")

        course = self._courses.get(course_id)
        if course.instructor_id != current_user.username:
            raise AuthorizationError("You do not teach this course")

        if self.active_session_for(current_user.username):
            raise SessionStateError("You already have an open session")

        return self._lifecycle.open(course.course_id, current_user.username)

    def end_session(self, current_user: SessionUser, session_id: str) -> AttendanceSession:
        session = self.owned(current_user, session_id)
        return self._lifecycle.close(session.session_id)

    def delete_session(self, current_user: SessionUser, session_id: str) -> int:
        if current_user.role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        self.get(session_id)
        return self._lifecycle.discard(session_id)

    def regenerate_token(self, current_user: SessionUser, session_id: str) -> TokenView:
        session = self.owned(current_user, session_id)
        if not session.is_open:
            raise SessionStateError("Session is closed")
        self._lifecycle.regenerate(session_id)
        return self.token_view(current_user, session_id)

    def token_view(self, current_user: SessionUser, session_id: str) -> TokenView:
        session = self.owned(current_user, session_id)
        if not session.is_open:
            raise SessionStateError("Session is closed")

        controller = self._lifecycle.controller_for(session_id)
        token = controller.current_token
        return TokenView(
            session_id=session_id,
            payload=controller.current_payload,
            issue_time=token.issue_time,
            validity_window=token.validity_window,
            seconds_left=controller.seconds_left(),
            seconds_to_rotation=controller.seconds_to_rotation,
        )

    def owned(self, current_user: SessionUser, session_id: str) -> AttendanceSession:
        """Return the session if the user may manage it (admin or its instructor)."""
        session = self.get(session_id)
        if current_user.role == Role.ADMIN:
            return session
        if current_user.role == Role.INSTRUCTOR and session.instructor_id == current_user.username:
            return session
        raise AuthorizationError("You do not have permission")

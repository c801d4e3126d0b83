from __future__ import annotations

import logging
import uuid

from ..attendance.ledger import AttendanceLedger
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..sessions.lifecycle import SessionLifecycle
from ..storage.store import AppStore
from ..users.model import SessionUser
from .model import Course

logger = logging.getLogger(__name__)


class CourseService:
    """Use case: instructors manage their courses."""

    def __init__(self, store: AppStore, ledger: AttendanceLedger, lifecycle: SessionLifecycle):
        self._store = store
        self._ledger = ledger
        self._lifecycle = lifecycle

    def get(self, course_id: str) -> Course:
        course = self._store.find_course(course_id)
        if not course:
            raise NotFoundError("Course not found")
        return course

    def list_for(self, current_user: SessionUser) -> list[Course]:
        if current_user.role == Role.ADMIN:
            return list(self._store.courses)
        if current_user.role == Role.INSTRUCTOR:
            return [c for c in self._store.courses if c.instructor_id == current_user.username]
        if current_user.role == Role.LEARNER:
            return []
        raise ValueError(f"unhandled role {current_user.role!r}")

    def add_course(self, current_user: SessionUser, *, name: str, code: str) -> Course:
        if current_user.role != Role.INSTRUCTOR:
            raise AuthorizationError("Only instructors can add courses")

        course = Course(
            course_id=f"course_{uuid.uuid4().hex}",
            name=require_non_empty(name, "Course name"),
            code=require_non_empty(code, "Course code"),
            instructor_id=current_user.username,
        )
        self._store.courses.append(course)
        self._store.mark_dirty()
        logger.info("course %s (%s) added by %s", course.course_id, course.code, current_user.username)
        return course

    def delete_course(self, current_user: SessionUser, course_id: str) -> None:
        course = self.get(course_id)
        if current_user.role != Role.ADMIN and course.instructor_id != current_user.username:
            raise AuthorizationError("You do not have permission")
        self._cascade_delete(course)

    def delete_courses_of(self, instructor_id: str) -> int:
        owned = [c for c in self._store.courses if c.instructor_id == instructor_id]
        for course in owned:
            self._cascade_delete(course)
        return len(owned)

    def _cascade_delete(self, course: Course) -> None:
        for session in [s for s in self._store.sessions if s.course_id == course.course_id]:
            self._lifecycle.close(session.session_id)

        removed = self._ledger.delete_by_course(course.course_id)
        self._store.sessions[:] = [s for s in self._store.sessions if s.course_id != course.course_id]
        self._store.courses[:] = [c for c in self._store.courses if c.course_id != course.course_id]
        self._store.mark_dirty()
        logger.info("course %s deleted (%d records removed)", course.course_id, removed)

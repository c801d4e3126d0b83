from __future__ import annotations

import dataclasses
import logging
import uuid
from typing import Callable, Optional

from ..attendance.ledger import AttendanceLedger
from ..common.scheduler import CooperativeScheduler
from ..storage.store import AppStore
from ..tokens.model import CheckinToken
from ..tokens.rotation import TokenRotationController
from .model import AttendanceSession

logger = logging.getLogger(__name__)

ControllerFactory = Callable[[], TokenRotationController]


def new_session_id() -> str:
    return f"sess_{uuid.uuid4().hex}"


class SessionLifecycle:
    """Open/close state of sessions and the rotation controllers they own.

    States: Open -> Closed (terminal). Opening always creates a new session;
    a closed session cannot be reopened. Token rotation runs only while the
    session is open.
    """

    def __init__(
        self,
        store: AppStore,
        ledger: AttendanceLedger,
        scheduler: CooperativeScheduler,
        *,
        controller_factory: Optional[ControllerFactory] = None,
    ):
        self._store = store
        self._ledger = ledger
        self._clock = scheduler.clock
        self._controller_factory = controller_factory or (lambda: TokenRotationController(scheduler))
        self._controllers: dict[str, TokenRotationController] = {}

    def open(self, course_id: str, instructor_id: str) -> AttendanceSession:
        session = AttendanceSession(
            session_id=new_session_id(),
            course_id=course_id,
            instructor_id=instructor_id,
            open_time=self._clock.now(),
        )
        self._store.sessions.append(session)
        self._store.mark_dirty()

        controller = self._controller_factory()
        self._controllers[session.session_id] = controller
        controller.start(session.session_id, course_id)

        logger.info("session %s opened for course %s by %s", session.session_id, course_id, instructor_id)
        return session

    def close(self, session_id: str) -> Optional[AttendanceSession]:
        session = self._store.find_session(session_id)
        if session is None:
            return None

        controller = self._controllers.pop(session_id, None)
        if controller is not None:
            controller.stop()

        if not session.is_open:
            return session

        closed = dataclasses.replace(session, close_time=self._clock.now())
        self._store.replace_session(closed)
        self._store.mark_dirty()
        logger.info("session %s closed", session_id)
        return closed

    def discard(self, session_id: str) -> int:
        """Remove a session and its records; returns the number of records removed."""
        self.close(session_id)
        self._store.sessions[:] = [s for s in self._store.sessions if s.session_id != session_id]
        self._store.mark_dirty()
        return self._ledger.delete_by_session(session_id)

    def is_open(self, session_id: str) -> bool:
        session = self._store.find_session(session_id)
        return bool(session and session.is_open)

    def open_session_for_course(self, course_id: str) -> Optional[AttendanceSession]:
        return next((s for s in self._store.sessions if s.course_id == course_id and s.is_open), None)

    def open_session_for_instructor(self, instructor_id: str) -> Optional[AttendanceSession]:
        return next((s for s in self._store.sessions if s.instructor_id == instructor_id and s.is_open), None)

    def controller_for(self, session_id: str) -> Optional[TokenRotationController]:
        controller = self._controllers.get(session_id)
        if controller is None and self.is_open(session_id):
            # open session loaded from storage after a restart: resume rotation
            session = self._store.find_session(session_id)
            controller = self._controller_factory()
            self._controllers[session_id] = controller
            controller.start(session.session_id, session.course_id)
        return controller

    def current_token(self, session_id: str) -> Optional[CheckinToken]:
        controller = self.controller_for(session_id)
        return controller.current_token if controller else None

    def regenerate(self, session_id: str) -> Optional[CheckinToken]:
        controller = self.controller_for(session_id)
        return controller.regenerate() if controller else None

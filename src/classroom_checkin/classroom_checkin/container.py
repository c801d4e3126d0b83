from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .attendance.ledger import AttendanceLedger
from .attendance.service import CheckinService
from .common.clock import Clock, SystemClock
from .common.scheduler import CooperativeScheduler
from .core.constants import DEFAULT_GRACE, DEFAULT_ROTATION_PERIOD, DEFAULT_TIMER_INTERVAL
from .courses.service import CourseService
from .reports.service import HistoryService
from .sessions.lifecycle import SessionLifecycle
from .sessions.service import SessionService
from .storage.keyvalue import KeyValueStore
from .storage.persistence import StorePersistence
from .storage.store import AppStore
from .tokens.codec import TokenCodec
from .tokens.rotation import TokenRotationController
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    clock: Clock
    scheduler: CooperativeScheduler
    store: AppStore
    persistence: StorePersistence

    codec: TokenCodec
    ledger: AttendanceLedger
    lifecycle: SessionLifecycle

    auth_service: AuthService
    user_service: UserService
    course_service: CourseService
    session_service: SessionService
    checkin_service: CheckinService
    history_service: HistoryService

    def persist_if_dirty(self) -> bool:
        if not self.store.dirty:
            return False
        self.persistence.save(self.store)
        return True


def build_container(
    *,
    kv: KeyValueStore,
    clock: Optional[Clock] = None,
    scheduler: Optional[CooperativeScheduler] = None,
    defaults: Optional[Callable[[], AppStore]] = None,
    rotation_period: int = DEFAULT_ROTATION_PERIOD,
    grace: int = DEFAULT_GRACE,
    timer_interval: int = DEFAULT_TIMER_INTERVAL,
) -> Container:
    clock = clock or (scheduler.clock if scheduler else SystemClock())
    scheduler = scheduler or CooperativeScheduler(clock)

    persistence = StorePersistence(kv, defaults=defaults)
    store = persistence.load()

    codec = TokenCodec()
    ledger = AttendanceLedger(store)
    lifecycle = SessionLifecycle(
        store,
        ledger,
        scheduler,
        controller_factory=lambda: TokenRotationController(
            scheduler,
            codec,
            rotation_period=rotation_period,
            grace=grace,
            timer_interval=timer_interval,
        ),
    )

    course_service = CourseService(store, ledger, lifecycle)
    auth_service = AuthService(store)
    user_service = UserService(store, course_service)
    session_service = SessionService(store, lifecycle, course_service)
    checkin_service = CheckinService(store, ledger, lifecycle, clock, user_service, codec=codec)
    history_service = HistoryService(store, ledger)

    return Container(
        clock=clock,
        scheduler=scheduler,
        store=store,
        persistence=persistence,
        codec=codec,
        ledger=ledger,
        lifecycle=lifecycle,
        auth_service=auth_service,
        user_service=user_service,
        course_service=course_service,
        session_service=session_service,
        checkin_service=checkin_service,
        history_service=history_service,
    )

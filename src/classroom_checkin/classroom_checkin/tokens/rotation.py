from __future__ import annotations

import logging
from typing import Callable, Optional

from ..common.scheduler import CooperativeScheduler, PeriodicTask
from ..core.constants import DEFAULT_GRACE, DEFAULT_ROTATION_PERIOD, DEFAULT_TIMER_INTERVAL
from .codec import TokenCodec
from .model import CheckinToken

logger = logging.getLogger(__name__)

DisplayListener = Callable[[str], None]


class TokenRotationController:
    """Owns the active check-in token of one session.

    A periodic task fires every ``timer_interval`` seconds and counts down
    from ``rotation_period``; at zero a fresh token is issued. Each token is
    valid for ``rotation_period + grace`` seconds, so the previous token stays
    acceptable for ``grace`` seconds after the next one is issued.
    """

    def __init__(
        self,
        scheduler: CooperativeScheduler,
        codec: TokenCodec | None = None,
        *,
        rotation_period: int = DEFAULT_ROTATION_PERIOD,
        grace: int = DEFAULT_GRACE,
        timer_interval: int = DEFAULT_TIMER_INTERVAL,
    ):
        if int(rotation_period) <= 0:
            raise ValueError("rotation_period must be positive")
        if int(grace) < 0:
            raise ValueError("grace must not be negative")

        self._scheduler = scheduler
        self._clock = scheduler.clock
        self._codec = codec or TokenCodec()
        self._rotation_period = int(rotation_period)
        self._grace = int(grace)
        self._timer_interval = int(timer_interval)

        self._session_id: Optional[str] = None
        self._course_id: Optional[str] = None
        self._token: Optional[CheckinToken] = None
        self._payload: Optional[str] = None
        self._countdown = 0
        self._task: Optional[PeriodicTask] = None
        self._listeners: list[DisplayListener] = []

    @property
    def validity_window(self) -> int:
        return self._rotation_period + self._grace

    @property
    def running(self) -> bool:
        return self._session_id is not None

    @property
    def current_token(self) -> Optional[CheckinToken]:
        return self._token

    @property
    def current_payload(self) -> Optional[str]:
        return self._payload

    @property
    def seconds_to_rotation(self) -> int:
        return self._countdown if self.running else 0

    def seconds_left(self, now: int | None = None) -> int:
        if not self._token:
            return 0
        return self._token.seconds_left(self._clock.now() if now is None else now)

    def subscribe(self, listener: DisplayListener) -> None:
        self._listeners.append(listener)

    def start(self, session_id: str, course_id: str) -> CheckinToken:
        """Issue a token now and keep rotating it.

        Calling again for the running session reissues immediately.
        """
        self._session_id = session_id
        self._course_id = course_id
        token = self._issue()
        if self._task is None or self._task.cancelled:
            self._task = self._scheduler.every(self._timer_interval, self._on_timer)
        return token

    def regenerate(self) -> Optional[CheckinToken]:
        if not self.running:
            return None
        return self.start(self._session_id, self._course_id)

    def tick(self) -> Optional[CheckinToken]:
        if not self.running:
            return None
        return self._issue()

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        if self._session_id is not None:
            logger.info("token rotation stopped for session %s", self._session_id)
        self._session_id = None
        self._course_id = None
        self._token = None
        self._payload = None
        self._countdown = 0

    def _on_timer(self) -> None:
        if not self.running:
            return
        self._countdown -= self._timer_interval
        if self._countdown <= 0:
            self.tick()

    def _issue(self) -> CheckinToken:
        token = CheckinToken(
            session_id=self._session_id,
            course_id=self._course_id,
            issue_time=self._clock.now(),
            validity_window=self.validity_window,
        )
        self._token = token
        self._payload = self._codec.encode_token(token)
        self._countdown = self._rotation_period
        logger.debug("issued token for session %s at %s", token.session_id, token.issue_time)

        for listener in list(self._listeners):
            listener(self._payload)
        return token

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AttendanceSession:
    """One instructor-led attendance window for one course.

    Immutable apart from ``close_time``, which only SessionLifecycle sets
    (by storing a replaced copy).
    """

    session_id: str
    course_id: str
    instructor_id: str
    open_time: int
    close_time: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.close_time is None

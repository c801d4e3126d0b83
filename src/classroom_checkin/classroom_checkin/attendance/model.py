from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in. Never mutated after creation."""

    record_id: str
    subject_id: str
    course_id: str
    session_id: str
    recorded_at: int

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Course:
    course_id: str
    name: str
    code: str
    instructor_id: str

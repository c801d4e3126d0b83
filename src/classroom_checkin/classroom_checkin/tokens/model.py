from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CheckinToken:
    """Ephemeral check-in token. Never persisted.

    Valid on the closed interval [issue_time, issue_time + validity_window].
    """

    session_id: str
    course_id: str
    issue_time: int
    validity_window: int

    @property
    def expires_at(self) -> int:
        return self.issue_time + self.validity_window

    def seconds_left(self, now: int) -> int:
        return self.validity_window - (int(now) - self.issue_time)

    def is_valid_at(self, now: int) -> bool:
        age = int(now) - self.issue_time
        return 0 <= age <= self.validity_window

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for authorization and per-role views."""

    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    LEARNER = "learner"


class Title(str, Enum):
    MR = "mr"
    MRS = "mrs"
    MS = "ms"


class RejectReason(str, Enum):
    """Why a scanned check-in token was refused."""

    MALFORMED = "MALFORMED"
    EXPIRED = "EXPIRED"
    SESSION_MISMATCH = "SESSION_MISMATCH"


class RecordOutcome(str, Enum):
    """Result of writing to the attendance ledger. DUPLICATE is not an error."""

    OK = "OK"
    DUPLICATE = "DUPLICATE"


class CheckinOutcome(str, Enum):
    RECORDED = "RECORDED"
    DUPLICATE = "DUPLICATE"
    MALFORMED = "MALFORMED"
    EXPIRED = "EXPIRED"
    SESSION_MISMATCH = "SESSION_MISMATCH"

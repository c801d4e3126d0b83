from __future__ import annotations

from datetime import datetime


def to_local(epoch_seconds: int) -> datetime:
    """Epoch seconds to a naive local datetime."""
    return datetime.fromtimestamp(int(epoch_seconds))


def format_date(epoch_seconds: int) -> str:
    return to_local(epoch_seconds).strftime("%Y-%m-%d")


def format_time(epoch_seconds: int) -> str:
    return to_local(epoch_seconds).strftime("%H:%M:%S")

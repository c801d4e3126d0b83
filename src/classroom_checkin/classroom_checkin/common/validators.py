from __future__ import annotations

from ..core.exceptions import ValidationError


def require_text(value, field_name: str) -> str | None:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value


def require_non_empty(value: str, field_name: str) -> str:
    value = require_text(value, field_name)
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    value = require_text(value, field_name)
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value

from __future__ import annotations

import pytest

from src.classroom_checkin.classroom_checkin.common.validators import (
    require_min_length,
    require_non_empty,
    require_text,
)
from src.classroom_checkin.classroom_checkin.core.exceptions import ValidationError


def test_require_non_empty_strips():
    assert require_non_empty("  CS101 ", "Course code") == "CS101"


@pytest.mark.parametrize("value", ["", "   ", None, 5, ["a"]])
def test_require_non_empty_rejects(value):
    with pytest.raises(ValidationError):
        require_non_empty(value, "Name")


def test_require_min_length():
    assert require_min_length("secret", "Password", 6) == "secret"
    with pytest.raises(ValidationError):
        require_min_length("short", "Password", 6)
    with pytest.raises(ValidationError):
        require_min_length(1234567, "Password", 6)


def test_require_text_allows_none():
    assert require_text(None, "Email") is None
    with pytest.raises(ValidationError):
        require_text(3.5, "Email")

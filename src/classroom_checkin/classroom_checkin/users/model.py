from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role, Title


@dataclass(frozen=True)
class Account:
    """Domain entity: an account of any role.

    Note: plain data object, no storage access.
    """

    username: str
    password_hash: str
    role: Role
    title: Optional[Title] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    date_of_birth: Optional[str] = None
    major: Optional[str] = None
    department: Optional[str] = None

    @property
    def full_name(self) -> str:
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or self.username


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    username: str
    full_name: str
    role: Role

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty, require_text
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role, Title
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..courses.service import CourseService
from ..storage.store import AppStore
from .model import Account, SessionUser

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("title", "first_name", "last_name", "email", "date_of_birth", "major", "department")


def _coerce_title(value) -> Optional[Title]:
    if value in (None, ""):
        return None
    try:
        return Title(value)
    except ValueError:
        raise ValidationError("Invalid title")


class AuthService:
    """Use case: authenticate (login)."""

    def __init__(self, store: AppStore):
        self._store = store

    def authenticate(self, username: str, password: str) -> SessionUser:
        if not isinstance(username, str) or not isinstance(password, str):
            raise AuthenticationError("Wrong username or password")

        account = self._store.find_account(username.strip())
        if not account:
            raise AuthenticationError("Wrong username or password")

        try:
            ok = check_password_hash(account.password_hash, password)
        except ValueError:
            # unknown hash method in stored data
            ok = False

        if not ok:
            raise AuthenticationError("Wrong username or password")

        return SessionUser(username=account.username, full_name=account.full_name, role=account.role)


class UserService:
    """Use case: registration, profile edits and admin account management."""

    def __init__(self, store: AppStore, courses: CourseService):
        self._store = store
        self._courses = courses

    def get(self, username: str) -> Account:
        account = self._store.find_account(username)
        if not account:
            raise NotFoundError("Account not found")
        return account

    def learner_exists(self, username: str) -> bool:
        if not isinstance(username, str):
            return False
        account = self._store.find_account(username.strip())
        return bool(account and account.role == Role.LEARNER)

    def list_accounts(self, *, current_role: Role) -> list[Account]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        return list(self._store.accounts)

    def register(self, *, username: str, password: str, role: Role, **profile) -> Account:
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if role == Role.ADMIN:
            raise ValidationError("Administrator accounts cannot be registered")
        if self._store.find_account(username):
            raise ValidationError("Username is already taken")

        account = Account(
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
            **self._clean_profile(profile),
        )
        self._store.accounts.append(account)
        self._store.mark_dirty()
        logger.info("registered %s account %s", role.value, username)
        return account

    def update_profile(self, username: str, **changes) -> Account:
        """Own-profile edit: username and role stay as they are."""
        account = self.get(username)
        updated = dataclasses.replace(account, **self._clean_profile(changes))
        return self._replace(updated)

    def update_user(self, *, current_role: Role, username: str, role: Role | None = None, password: str | None = None, **changes) -> Account:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        account = self.get(username)
        fields = self._clean_profile(changes)
        if role is not None:
            fields["role"] = Role(role)
        if password:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            fields["password_hash"] = generate_password_hash(password)
        return self._replace(dataclasses.replace(account, **fields))

    def delete_user(self, *, current_role: Role, current_username: str, username: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        if username == current_username:
            raise ValidationError("You cannot delete your own account")

        account = self.get(username)
        if account.role == Role.INSTRUCTOR:
            self._courses.delete_courses_of(account.username)

        self._store.accounts[:] = [a for a in self._store.accounts if a.username != username]
        self._store.mark_dirty()
        logger.info("deleted account %s", username)

    def _replace(self, updated: Account) -> Account:
        for i, a in enumerate(self._store.accounts):
            if a.username == updated.username:
                self._store.accounts[i] = updated
                self._store.mark_dirty()
                return updated
        raise NotFoundError("Account not found")

    @staticmethod
    def _clean_profile(values: dict) -> dict:
        unknown = set(values) - set(PROFILE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        cleaned = {}
        for key, value in values.items():
            if key == "title":
                cleaned[key] = _coerce_title(value)
            else:
                cleaned[key] = (require_text(value, key) or "").strip() or None
        return cleaned

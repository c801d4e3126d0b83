"""Load the AppStore from a key-value backend and write it back.

Each collection lives under its own key as a JSON array. A collection that
is missing, unparsable, has an item of the wrong shape or repeats a key
(for records: a second check-in of the same subject in one session) is
replaced by its default (seed data) and the problem is logged; start-up
never fails on bad stored data.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import Any, Callable, Optional

from ..attendance.model import AttendanceRecord
from ..core.constants import (
    ACCOUNTS_STORAGE_KEY,
    COURSES_STORAGE_KEY,
    RECORDS_STORAGE_KEY,
    SESSIONS_STORAGE_KEY,
)
from ..core.enums import Role, Title
from ..courses.model import Course
from ..sessions.model import AttendanceSession
from ..users.model import Account
from .keyvalue import KeyValueStore
from .store import AppStore

logger = logging.getLogger(__name__)


def _has_keys(*keys: str) -> Callable[[Any], bool]:
    def check(item: Any) -> bool:
        return isinstance(item, dict) and all(k in item for k in keys)

    return check


def _account_from_dict(d: dict) -> Account:
    title = d.get("title")
    return Account(
        username=str(d["username"]),
        password_hash=str(d["password_hash"]),
        role=Role(d["role"]),
        title=Title(title) if title else None,
        first_name=d.get("first_name"),
        last_name=d.get("last_name"),
        email=d.get("email"),
        date_of_birth=d.get("date_of_birth"),
        major=d.get("major"),
        department=d.get("department"),
    )


def _account_to_dict(a: Account) -> dict:
    d = asdict(a)
    d["role"] = a.role.value
    d["title"] = a.title.value if a.title else None
    return d


def _course_from_dict(d: dict) -> Course:
    return Course(
        course_id=str(d["course_id"]),
        name=str(d["name"]),
        code=str(d["code"]),
        instructor_id=str(d["instructor_id"]),
    )


def _session_from_dict(d: dict) -> AttendanceSession:
    close_time = d.get("close_time")
    return AttendanceSession(
        session_id=str(d["session_id"]),
        course_id=str(d["course_id"]),
        instructor_id=str(d["instructor_id"]),
        open_time=int(d["open_time"]),
        close_time=int(close_time) if close_time is not None else None,
    )


def _record_from_dict(d: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=str(d["record_id"]),
        subject_id=str(d["subject_id"]),
        course_id=str(d["course_id"]),
        session_id=str(d["session_id"]),
        recorded_at=int(d["recorded_at"]),
    )


_COLLECTIONS = (
    # attribute, storage key, shape check, from_dict, to_dict, unique key
    ("accounts", ACCOUNTS_STORAGE_KEY, _has_keys("username", "password_hash", "role"), _account_from_dict, _account_to_dict,
     lambda a: a.username),
    ("courses", COURSES_STORAGE_KEY, _has_keys("course_id", "name", "code", "instructor_id"), _course_from_dict, asdict,
     lambda c: c.course_id),
    ("sessions", SESSIONS_STORAGE_KEY, _has_keys("session_id", "course_id", "open_time"), _session_from_dict, asdict,
     lambda s: s.session_id),
    # one record per (session, subject)
    ("records", RECORDS_STORAGE_KEY, _has_keys("record_id", "subject_id", "recorded_at", "course_id", "session_id"), _record_from_dict, asdict,
     lambda r: (r.session_id, r.subject_id)),
)


class StorePersistence:
    def __init__(self, kv: KeyValueStore, *, defaults: Optional[Callable[[], AppStore]] = None):
        self._kv = kv
        self._defaults = defaults or AppStore

    def load(self) -> AppStore:
        default = self._defaults()
        store = AppStore()
        for attr, key, check, from_dict, _, unique in _COLLECTIONS:
            items = self._load_collection(key, check, from_dict, unique)
            setattr(store, attr, items if items is not None else list(getattr(default, attr)))
        return store

    def save(self, store: AppStore) -> None:
        for attr, key, _, _, to_dict, _ in _COLLECTIONS:
            self._kv.set_item(key, json.dumps([to_dict(x) for x in getattr(store, attr)], ensure_ascii=False))
        store.dirty = False
        logger.debug("store saved")

    def _load_collection(self, key: str, check, from_dict, unique) -> Optional[list]:
        raw = self._kv.get_item(key)
        if raw is None:
            return None

        try:
            parsed = json.loads(raw)
        except (ValueError, RecursionError):
            logger.error("could not parse %s from storage, using defaults", key)
            return None

        if not isinstance(parsed, list) or not all(check(item) for item in parsed):
            logger.error("unexpected shape for %s in storage, using defaults", key)
            return None

        try:
            items = [from_dict(item) for item in parsed]
        except (TypeError, ValueError) as e:
            logger.error("invalid value in %s (%s), using defaults", key, e)
            return None

        if len({unique(x) for x in items}) != len(items):
            logger.error("duplicate entries in %s, using defaults", key)
            return None
        return items

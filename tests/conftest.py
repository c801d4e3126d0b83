from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.classroom_checkin.classroom_checkin.common.clock import ManualClock
from src.classroom_checkin.classroom_checkin.common.scheduler import ManualScheduler
from src.classroom_checkin.classroom_checkin.container import build_container
from src.classroom_checkin.classroom_checkin.core.enums import Role, Title
from src.classroom_checkin.classroom_checkin.courses.model import Course
from src.classroom_checkin.classroom_checkin.storage.keyvalue import InMemoryKeyValueStore
from src.classroom_checkin.classroom_checkin.storage.store import AppStore
from src.classroom_checkin.classroom_checkin.users.model import Account, SessionUser

T0 = 1_700_000_000

# cheap hashes keep the suite fast
_FAST_HASH = "pbkdf2:sha256:1000"


def make_account(username: str, password: str, role: Role, **profile) -> Account:
    return Account(username, generate_password_hash(password, method=_FAST_HASH), role, **profile)


def base_store() -> AppStore:
    return AppStore(
        accounts=[
            make_account("admin", "admin123", Role.ADMIN, first_name="System", last_name="Admin"),
            make_account("t1", "teacher123", Role.INSTRUCTOR, title=Title.MR, first_name="Tom", last_name="Teach"),
            make_account("t2", "teacher456", Role.INSTRUCTOR, title=Title.MS, first_name="Tia", last_name="Tutor"),
            make_account("s1", "student123", Role.LEARNER, first_name="Sam", last_name="One"),
            make_account("s2", "student456", Role.LEARNER, first_name="Sue", last_name="Two"),
        ],
        courses=[
            Course("c1", "Introduction to Programming", "CS101", "t1"),
            Course("c2", "Web Development", "IT102", "t2"),
        ],
    )


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(start=T0)


@pytest.fixture
def scheduler(clock) -> ManualScheduler:
    return ManualScheduler(clock)


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def container(kv, scheduler):
    return build_container(kv=kv, scheduler=scheduler, defaults=base_store)


@pytest.fixture
def admin() -> SessionUser:
    return SessionUser("admin", "System Admin", Role.ADMIN)


@pytest.fixture
def teacher() -> SessionUser:
    return SessionUser("t1", "Tom Teach", Role.INSTRUCTOR)


@pytest.fixture
def other_teacher() -> SessionUser:
    return SessionUser("t2", "Tia Tutor", Role.INSTRUCTOR)


@pytest.fixture
def learner() -> SessionUser:
    return SessionUser("s1", "Sam One", Role.LEARNER)


@pytest.fixture(name="make_account")
def make_account_fixture():
    return make_account

"""Demo data used when storage is empty."""

from __future__ import annotations

import random

from werkzeug.security import generate_password_hash

from ..attendance.model import AttendanceRecord
from ..core.enums import Role, Title
from ..courses.model import Course
from ..sessions.model import AttendanceSession
from ..users.model import Account
from .store import AppStore

DAY = 24 * 60 * 60
SESSIONS_PER_COURSE = 10
SESSION_SPACING = 3 * DAY
SESSION_LENGTH = 60 * 60
ATTENDANCE_RATE = 0.7
CHECKIN_WINDOW = 30 * 60


def demo_accounts() -> list[Account]:
    accounts = [
        Account("admin", generate_password_hash("admin123"), Role.ADMIN, Title.MR, "System", "Admin",
                email="admin@example.com", department="IT Department"),
        Account("teacher.somchai", generate_password_hash("teacher123"), Role.INSTRUCTOR, Title.MR, "Somchai", "Sondee",
                email="somchai.t@example.com", date_of_birth="1985-05-15", department="Computer Science"),
        Account("teacher.somsri", generate_password_hash("teacher456"), Role.INSTRUCTOR, Title.MS, "Somsri", "Rakrian",
                email="somsri.p@example.com", date_of_birth="1988-11-22", department="Information Technology"),
        Account("65010001", generate_password_hash("student123"), Role.LEARNER, Title.MR, "Mana", "Tangjai",
                email="65010001@student.example.com", date_of_birth="2003-08-20", major="Software Engineering"),
        Account("65010002", generate_password_hash("student456"), Role.LEARNER, Title.MS, "Piti", "Khayan",
                email="65010002@student.example.com", date_of_birth="2004-01-10", major="Data Science"),
    ]
    for i in range(3, 23):
        username = f"650100{i:02d}"
        accounts.append(
            Account(
                username=username,
                password_hash=generate_password_hash(f"student{username}"),
                role=Role.LEARNER,
                title=Title.MS if i % 2 == 0 else Title.MR,
                first_name=f"Learner{i}",
                last_name="Test",
                email=f"{username}@student.example.com",
                date_of_birth=f"2003-01-{i:02d}",
                major="Software Engineering" if i % 3 == 0 else "Data Science",
            )
        )
    return accounts


def demo_courses() -> list[Course]:
    return [
        Course("course_1", "Introduction to Programming", "CS101", "teacher.somchai"),
        Course("course_2", "Web Development", "IT102", "teacher.somsri"),
        Course("course_3", "Data Structures", "CS201", "teacher.somchai"),
        Course("course_4", "Networking Fundamentals", "IT202", "teacher.somsri"),
    ]


def build_demo_store(now: int, *, seed: int = 42) -> AppStore:
    rng = random.Random(seed)
    accounts = demo_accounts()
    courses = demo_courses()
    learners = [a for a in accounts if a.role == Role.LEARNER]

    sessions: list[AttendanceSession] = []
    records: list[AttendanceRecord] = []
    for course_index, course in enumerate(courses):
        for i in range(SESSIONS_PER_COURSE):
            session_id = f"sess_{course.course_id}_{i}"
            open_time = now - (course_index * SESSIONS_PER_COURSE + i) * SESSION_SPACING
            sessions.append(
                AttendanceSession(
                    session_id=session_id,
                    course_id=course.course_id,
                    instructor_id=course.instructor_id,
                    open_time=open_time,
                    close_time=open_time + SESSION_LENGTH,
                )
            )
            for learner in learners:
                if rng.random() < ATTENDANCE_RATE:
                    records.append(
                        AttendanceRecord(
                            record_id=f"rec_{session_id}_{learner.username}",
                            subject_id=learner.username,
                            course_id=course.course_id,
                            session_id=session_id,
                            recorded_at=open_time + rng.randrange(CHECKIN_WINDOW),
                        )
                    )

    return AppStore(accounts=accounts, courses=courses, sessions=sessions, records=records)

"""Example: drive the service layer directly (no Flask).

Opens a session, checks a learner in with the current code and prints the
learner's attendance summary.
"""

from src.classroom_checkin.classroom_checkin.common.clock import ManualClock
from src.classroom_checkin.classroom_checkin.common.scheduler import ManualScheduler
from src.classroom_checkin.classroom_checkin.container import build_container
from src.classroom_checkin.classroom_checkin.storage.keyvalue import InMemoryKeyValueStore
from src.classroom_checkin.classroom_checkin.storage.seed import build_demo_store
from src.classroom_checkin.classroom_checkin.users.model import SessionUser
from src.classroom_checkin.classroom_checkin.core.enums import Role


def main():
    scheduler = ManualScheduler(ManualClock(start=1_700_000_000))
    container = build_container(
        kv=InMemoryKeyValueStore(),
        scheduler=scheduler,
        defaults=lambda: build_demo_store(scheduler.clock.now()),
    )

    teacher = SessionUser("teacher.somchai", "Somchai Sondee", Role.INSTRUCTOR)
    session = container.session_service.start_session(teacher, "course_1")
    view = container.session_service.token_view(teacher, session.session_id)
    print("current code:", view.payload)

    scheduler.advance(10)
    result = container.checkin_service.scan("65010001", view.payload)
    print(result.outcome.value, "-", result.message)

    summary = container.history_service.learner_summary("65010001")
    print(f"{summary.full_name}: {summary.attended}/{summary.total} ({summary.percentage}%)")


if __name__ == "__main__":
    main()

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.clock import SystemClock
from .common.logging_config import configure_logging
from .container import Container, build_container
from .courses.controller import register as register_courses
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DatabaseConnection, DBConfig
from .reports.controller import register as register_reports
from .sessions.controller import register as register_sessions
from .storage.keyvalue import InMemoryKeyValueStore
from .storage.mysql_kv_store import MySQLKeyValueStore
from .storage.seed import build_demo_store
from .storage.store import AppStore
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _build_kv(settings):
    backend = str(getattr(settings, "STORAGE_BACKEND", "memory")).lower()
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend != "mysql":
        raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")

    config = DBConfig.from_dict(getattr(settings, "DB_CONFIG"))
    conn = DatabaseConnection.get_instance(config)
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(conn, config.database, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(conn)))
    return MySQLKeyValueStore(conn)


def container_from_settings(settings) -> Container:
    clock = SystemClock()

    def demo_defaults() -> AppStore:
        return build_demo_store(clock.now())

    seed = bool(getattr(settings, "AUTO_SEED_DB", False))
    return build_container(
        kv=_build_kv(settings),
        clock=clock,
        defaults=demo_defaults if seed else AppStore,
        rotation_period=int(getattr(settings, "ROTATION_PERIOD_SECONDS", 60)),
        grace=int(getattr(settings, "GRACE_SECONDS", 5)),
        timer_interval=int(getattr(settings, "TIMER_INTERVAL_SECONDS", 1)),
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(str(getattr(settings, "LOG_LEVEL", "INFO")))
    logger.info("settings=%s backend=%s", settings_module, getattr(settings, "STORAGE_BACKEND", "memory"))

    if container is None:
        container = container_from_settings(settings)
    app.extensions["classroom_checkin"] = container

    @app.before_request
    def run_due_timers():
        # token rotation timers are cooperative: catch up before serving
        container.scheduler.run_pending()

    @app.after_request
    def persist_changes(response):
        if container.persist_if_dirty():
            logger.debug("store persisted after request")
        return response

    register_users(app, container)
    register_courses(app, container)
    register_sessions(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app

"""Central logging setup for the web app and scripts."""

from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_logging_initialized = False


def is_logging_configured() -> bool:
    return _logging_initialized


def configure_logging(
    log_level: str = "INFO",
    *,
    log_file: Optional[str] = None,
    console_output: bool = True,
    force_reconfigure: bool = False,
) -> None:
    """Configure the root logger once.

    Args:
        log_level: level name, e.g. "INFO" or "DEBUG".
        log_file: optional path of an extra file handler.
        console_output: attach a stream handler.
        force_reconfigure: replace handlers even if already configured.
    """
    global _logging_initialized

    if _logging_initialized and not force_reconfigure:
        return

    numeric_level = getattr(logging, str(log_level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    handlers: list[logging.Handler] = []
    if console_output:
        handlers.append(logging.StreamHandler())
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(numeric_level)
    for handler in handlers:
        root_logger.addHandler(handler)

    _logging_initialized = True
    logging.getLogger(__name__).info("logging configured (level=%s, file=%s)", log_level, log_file or "-")


def reset_logging() -> None:
    global _logging_initialized

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    _logging_initialized = False

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True, with_database: bool = True):
    """Open a connection and cursor; commit on success, roll back on error."""
    conn = conn_factory.connect(with_database=with_database)
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None

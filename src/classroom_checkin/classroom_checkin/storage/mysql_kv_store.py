from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .keyvalue import KeyValueStore


class MySQLKeyValueStore(KeyValueStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_item(self, key: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT storage_value
                FROM kv_store
                WHERE storage_key=%s
                """,
                (key,),
            )
            row = fetchone(cur)
            return row["storage_value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO kv_store(storage_key, storage_value)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE storage_value=VALUES(storage_value)
                """,
                (key, value),
            )

    def remove_item(self, key: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM kv_store WHERE storage_key=%s", (key,))

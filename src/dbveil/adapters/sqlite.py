"""SQLite adapter — standard-library sqlite3, file or in-memory."""

from __future__ import annotations

import sqlite3
from typing import Any

from dbveil.adapters._base import AdapterError, ConnectionConfig, DriverType
from dbveil.adapters._dbapi import DBAPIStatement


class SQLiteAdapter:
    """SQLite adapter — no server needed, qmark placeholders natively."""

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        path = config.params.get("path", ":memory:")
        try:
            return sqlite3.connect(path)
        except sqlite3.Error as e:
            raise AdapterError(f"SQLite connection failed: {e}") from e

    def prepare(self, cursor: Any, sql: str) -> DBAPIStatement:
        return DBAPIStatement(cursor, sql)

    def driver_type(self) -> DriverType:
        return DriverType.SQLITE

    def dialect(self) -> str:
        return "sqlite"

    def error_class(self) -> type[Exception]:
        return sqlite3.Error

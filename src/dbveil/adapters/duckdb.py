"""DuckDB adapter — local/in-memory, great for testing and local analytics."""

from __future__ import annotations

from typing import Any

import duckdb as _duckdb

from dbveil.adapters._base import AdapterError, ConnectionConfig, DriverType
from dbveil.adapters._dbapi import DBAPIStatement


class DuckDBStatement(DBAPIStatement):
    def update_count(self) -> int:
        # DuckDB reports -1 as rowcount; DML returns a single "Count" column instead.
        description = self.cursor.description
        if description and len(description) == 1 and description[0][0] == "Count":
            row = self.cursor.fetchone()
            return int(row[0]) if row else 0
        return self.cursor.rowcount


class DuckDBAdapter:
    """DuckDB adapter — in-process, no server needed."""

    def connect(self, config: ConnectionConfig) -> _duckdb.DuckDBPyConnection:
        path = config.params.get("path", ":memory:")
        try:
            return _duckdb.connect(path, config={"custom_user_agent": "dbveil/0.1.0"})
        except Exception as e:
            raise AdapterError(f"DuckDB connection failed: {e}") from e

    def prepare(self, cursor: Any, sql: str) -> DuckDBStatement:
        return DuckDBStatement(cursor, sql)

    def driver_type(self) -> DriverType:
        return DriverType.DUCKDB

    def dialect(self) -> str:
        return "duckdb"

    def error_class(self) -> type[Exception]:
        return _duckdb.Error

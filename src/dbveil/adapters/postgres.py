"""PostgreSQL adapter — psycopg (sync), ``?`` placeholders rewritten to ``%s``."""

from __future__ import annotations

from typing import Any

import psycopg
import sqlglot

from dbveil.adapters._base import AdapterError, ConnectionConfig, DriverType
from dbveil.adapters._dbapi import DBAPIStatement
from dbveil.policy.placeholders import to_format_style


class PostgresAdapter:
    """PostgreSQL adapter using psycopg."""

    def connect(self, config: ConnectionConfig) -> psycopg.Connection:
        dsn = config.params.get("dsn")
        if not dsn:
            raise AdapterError("PostgreSQL requires 'dsn' in connection params")
        try:
            return psycopg.connect(dsn, application_name="dbveil")
        except Exception as e:
            raise AdapterError(f"PostgreSQL connection failed: {e}") from e

    def prepare(self, cursor: Any, sql: str) -> DBAPIStatement:
        # Policies are keyed by the qmark text the caller wrote, not the
        # rewritten text sent to the server.
        try:
            native_sql = to_format_style(sql)
        except sqlglot.errors.TokenError as e:
            raise AdapterError(f"cannot prepare statement: {e}") from e
        return DBAPIStatement(cursor, sql, native_sql=native_sql)

    def driver_type(self) -> DriverType:
        return DriverType.POSTGRES

    def dialect(self) -> str:
        return "postgres"

    def error_class(self) -> type[Exception]:
        return psycopg.Error

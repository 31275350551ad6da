"""Per-ordinal binding on top of a plain DB-API cursor (qmark paramstyle)."""

from __future__ import annotations

from typing import Any

import sqlglot

from dbveil.errors import AdapterError
from dbveil.policy.placeholders import count_placeholders


class DBAPIStatement:
    """Emulates a prepared statement for drivers that only offer ``cursor.execute``.

    Bound values persist across executions until ``clear_parameters``, the way
    a native prepared statement keeps its bindings.
    """

    def __init__(self, cursor: Any, sql: str, *, native_sql: str | None = None) -> None:
        try:
            self._count = count_placeholders(sql)
        except sqlglot.errors.TokenError as e:
            raise AdapterError(f"cannot prepare statement: {e}") from e
        self.sql = sql
        self.native_sql = native_sql if native_sql is not None else sql
        self.cursor = cursor
        self._bound: dict[int, object] = {}

    def parameter_count(self) -> int:
        return self._count

    def bind(self, ordinal: int, value: object) -> None:
        if not 1 <= ordinal <= self._count:
            raise AdapterError(f"parameter index {ordinal} out of range [1, {self._count}]")
        self._bound[ordinal] = value

    def clear_parameters(self) -> None:
        self._bound.clear()

    def execute(self) -> Any:
        missing = [i for i in range(1, self._count + 1) if i not in self._bound]
        if missing:
            raise AdapterError(f"no value specified for parameter {missing[0]}")
        values = [self._bound[i] for i in range(1, self._count + 1)]
        if values:
            self.cursor.execute(self.native_sql, values)
        else:
            self.cursor.execute(self.native_sql)
        return self.cursor

    def update_count(self) -> int:
        """Rows affected by the last execution, or -1 when unknown."""
        return self.cursor.rowcount

    def close(self) -> None:
        self._bound.clear()
        self.cursor.close()

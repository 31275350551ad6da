"""Connection wrapper: intercepts prepare/cursor, forwards everything else to the driver."""

from __future__ import annotations

from typing import Any

from dbveil.adapters import DriverAdapter
from dbveil.cursor import ProtectedCursor
from dbveil.engine import ProtectionEngine
from dbveil.policy import PolicyResolver
from dbveil.statement import PreparedStatement


class ProtectedConnection:
    """A DB-API connection with a protection layer interposed.

    Only statement preparation and cursor creation are intercepted; commit,
    rollback, autocommit and every other attribute reach the wrapped
    connection untouched.
    """

    def __init__(
        self,
        raw: Any,
        adapter: DriverAdapter,
        engine: ProtectionEngine,
        resolver: PolicyResolver | None = None,
        *,
        name: str | None = None,
    ) -> None:
        self._raw = raw
        self._adapter = adapter
        self._engine = engine
        self._resolver = resolver if resolver is not None else PolicyResolver()
        self.name = name or adapter.driver_type().value

    @property
    def wrapped(self) -> Any:
        return self._raw

    @property
    def adapter(self) -> DriverAdapter:
        return self._adapter

    @property
    def engine(self) -> ProtectionEngine:
        return self._engine

    @property
    def resolver(self) -> PolicyResolver:
        return self._resolver

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._raw, name)

    def prepare(self, sql: str) -> PreparedStatement:
        """Prepare ``sql`` on a fresh driver cursor owned by the statement."""
        policy = self._resolver.resolve(sql)
        cursor = self._raw.cursor()
        try:
            native = self._adapter.prepare(cursor, sql)
        except Exception:
            cursor.close()
            raise
        return PreparedStatement(native, policy, self._engine, connection=self)

    def prepare_on(self, cursor: Any, sql: str) -> PreparedStatement:
        """Prepare ``sql`` on an existing driver cursor (used by ProtectedCursor.execute)."""
        policy = self._resolver.resolve(sql)
        native = self._adapter.prepare(cursor, sql)
        return PreparedStatement(native, policy, self._engine, connection=self)

    def cursor(self, *args: Any, **kwargs: Any) -> ProtectedCursor:
        return ProtectedCursor(self._raw.cursor(*args, **kwargs), self._engine, connection=self)

    def execute(self, sql: str, parameters: Any = None) -> ProtectedCursor:
        """Shortcut for ``cursor().execute(...)``, as sqlite3 and duckdb offer."""
        return self.cursor().execute(sql, parameters)

    def close(self) -> None:
        self._raw.close()

    def __enter__(self) -> ProtectedConnection:
        enter = getattr(self._raw, "__enter__", None)
        if enter is not None:
            enter()
        return self

    def __exit__(self, *exc_info: Any) -> Any:
        exit_ = getattr(self._raw, "__exit__", None)
        if exit_ is not None:
            return exit_(*exc_info)
        self.close()
        return None

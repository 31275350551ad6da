"""Result-side wrapper: values produced by the protection engine are revealed on fetch."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dbveil.connection import ProtectedConnection
    from dbveil.engine import ProtectionEngine

logger = logging.getLogger(__name__)


class ProtectedCursor:
    """DB-API cursor proxy.

    Every fetched value is checked against the engine's envelope shape and
    unprotected when it matches; there is no per-column shortcut. Unprotect
    failures propagate rather than handing ciphertext back to the caller.
    Attributes not defined here are forwarded to the driver cursor.
    """

    def __init__(
        self,
        cursor: Any,
        engine: ProtectionEngine,
        *,
        connection: ProtectedConnection | None = None,
    ) -> None:
        self._cursor = cursor
        self._engine = engine
        self._connection = connection
        self.revealed = 0

    @property
    def wrapped(self) -> Any:
        return self._cursor

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._cursor, name)

    # -- Execution --------------------------------------------------------------

    def execute(self, sql: str, parameters: Sequence | Mapping | None = None) -> ProtectedCursor:
        """Execute ``sql``.

        Positional parameters of a statement listed in the policy document go
        through protection. Everything else reaches the driver untouched, in
        the driver's own paramstyle.
        """
        self.revealed = 0
        if parameters is None:
            self._cursor.execute(sql)
            return self
        if isinstance(parameters, Mapping):
            self._warn_unprotected(sql, "named parameters")
            self._cursor.execute(sql, parameters)
            return self
        if self._connection is not None and self._connection.resolver.resolve(sql):
            statement = self._connection.prepare_on(self._cursor, sql)
            statement.bind(*parameters)
            statement.execute_native()
            return self

        self._cursor.execute(sql, parameters)
        return self

    def executemany(self, sql: str, seq_of_parameters: Any) -> ProtectedCursor:
        """Batched execution is forwarded as-is; no policy is applied."""
        self.revealed = 0
        self._warn_unprotected(sql, "executemany")
        self._cursor.executemany(sql, seq_of_parameters)
        return self

    def _warn_unprotected(self, sql: str, how: str) -> None:
        if self._connection is not None and self._connection.resolver.resolve(sql):
            logger.warning("%s bypasses parameter protection for %r", how, sql)

    # -- Fetching ---------------------------------------------------------------

    def reveal(self, value: object) -> object:
        if self._engine.is_envelope(value):
            plaintext, _ = self._engine.unprotect(value)
            self.revealed += 1
            return plaintext
        return value

    def _reveal_row(self, row: Any) -> Any:
        if isinstance(row, Mapping):
            return {key: self.reveal(value) for key, value in row.items()}
        if isinstance(row, list):
            return [self.reveal(value) for value in row]
        if isinstance(row, tuple) and hasattr(row, "_make"):
            return row._make(self.reveal(value) for value in row)
        return tuple(self.reveal(value) for value in row)

    def fetchone(self) -> Any:
        row = self._cursor.fetchone()
        return None if row is None else self._reveal_row(row)

    def fetchmany(self, size: int | None = None) -> list:
        rows = self._cursor.fetchmany() if size is None else self._cursor.fetchmany(size)
        return [self._reveal_row(row) for row in rows]

    def fetchall(self) -> list:
        return [self._reveal_row(row) for row in self._cursor.fetchall()]

    def __iter__(self) -> ProtectedCursor:
        return self

    def __next__(self) -> Any:
        row = self.fetchone()
        if row is None:
            raise StopIteration
        return row

    # -- Lifecycle --------------------------------------------------------------

    def close(self) -> None:
        self._cursor.close()

    def __enter__(self) -> ProtectedCursor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

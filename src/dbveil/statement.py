"""Prepared statement wrapper: binds are cached, protection happens at execute time."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from dbveil.cursor import ProtectedCursor
from dbveil.params import ParameterCache

if TYPE_CHECKING:
    from dbveil.adapters import NativeStatement
    from dbveil.connection import ProtectedConnection
    from dbveil.engine import ProtectionEngine
    from dbveil.policy import StatementPolicyMap

logger = logging.getLogger(__name__)


class PreparedStatement:
    """Prepared statement whose sensitive string parameters are protected on execute.

    Bind calls only fill the parameter cache. At execution:
        1. Walk ordinals 1..count in ascending order, skipping unset slots
        2. Protect the value if the ordinal has a policy and the value is a str
        3. Bind every value natively (only after all protect calls succeeded)
        4. Execute the native statement

    Protected values replace the cached plaintext, so executing again without
    clearing and re-binding protects the ciphertext a second time.
    """

    def __init__(
        self,
        native: NativeStatement,
        policy: StatementPolicyMap,
        engine: ProtectionEngine,
        *,
        connection: ProtectedConnection | None = None,
    ) -> None:
        self._native = native
        self._policy = policy
        self._engine = engine
        self._connection = connection
        self._params = ParameterCache(native.parameter_count())
        self._closed = False
        self.last_protected: list[int] = []

    @property
    def sql(self) -> str:
        return self._policy.sql

    @property
    def policy(self) -> StatementPolicyMap:
        return self._policy

    @property
    def parameters(self) -> ParameterCache:
        return self._params

    @property
    def native(self) -> NativeStatement:
        return self._native

    @property
    def closed(self) -> bool:
        return self._closed

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._native, name)

    # -- Binding ----------------------------------------------------------------

    def set(self, ordinal: int, value: object) -> None:
        self._params.set(ordinal, value)

    def bind(self, *values: object) -> None:
        """Bind ``values`` to ordinals 1..len(values)."""
        for ordinal, value in enumerate(values, start=1):
            self._params.set(ordinal, value)

    def clear_parameters(self) -> None:
        self._native.clear_parameters()
        self._params.clear()

    # -- Execution --------------------------------------------------------------

    def _apply_protection(self) -> list[int]:
        forwarded: list[tuple[int, object, bool]] = []
        for ordinal, value in self._params.bound():
            policy = self._policy.lookup(ordinal)
            if policy is not None and isinstance(value, str):
                forwarded.append((ordinal, self._engine.protect(value, policy), True))
            else:
                forwarded.append((ordinal, value, False))

        protected: list[int] = []
        for ordinal, value, was_protected in forwarded:
            if was_protected:
                self._params.set(ordinal, value)
                protected.append(ordinal)
            self._native.bind(ordinal, value)

        if protected:
            logger.debug("protected ordinal(s) %s of %r", protected, self.sql)
        self.last_protected = protected
        return protected

    def execute_native(self) -> Any:
        """Protect, bind and execute; returns the driver's own cursor."""
        self._apply_protection()
        return self._native.execute()

    def execute(self) -> ProtectedCursor:
        return ProtectedCursor(self.execute_native(), self._engine, connection=self._connection)

    def execute_query(self) -> ProtectedCursor:
        return self.execute()

    def execute_update(self) -> int:
        self.execute_native()
        return self._native.update_count()

    # -- Lifecycle --------------------------------------------------------------

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._params.clear()
            self._native.close()

    def __enter__(self) -> PreparedStatement:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

"""Protection engine protocol — the boundary between the SQL layer and cryptography."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from dbveil.errors import EngineError, UnauthorizedError
from dbveil.policy import ColumnProtectionPolicy

__all__ = ["EngineError", "ProtectionEngine", "UnauthorizedError"]


@runtime_checkable
class ProtectionEngine(Protocol):
    """Encrypts and decrypts single values under a column protection policy.

    Implementations must be safe to call from several threads at once. Calls
    block until done; retries, if any, belong to the implementation.
    """

    def protect(self, plaintext: str, policy: ColumnProtectionPolicy) -> str:
        """Return a self-describing envelope for ``plaintext``.

        Raises EngineError on key or transport failures and UnauthorizedError
        when the policy is denied to this engine.
        """
        ...

    def unprotect(self, value: str | bytes) -> tuple[str, ColumnProtectionPolicy]:
        """Return the plaintext and the policy it was protected under.

        Raises EngineError when ``value`` is not a valid envelope and
        UnauthorizedError when access to its key is denied.
        """
        ...

    def is_envelope(self, value: object) -> bool:
        """Cheap shape check; True means ``unprotect`` should be attempted."""
        ...

"""Protection engines — implementations of the ProtectionEngine protocol."""

from dbveil.engine._base import EngineError, ProtectionEngine, UnauthorizedError
from dbveil.engine.local import LocalEngine
from dbveil.engine.profile import (
    Profile,
    create_profile,
    load_profile,
    reset_shared_engines,
    shared_engine,
)

__all__ = [
    "EngineError",
    "LocalEngine",
    "Profile",
    "ProtectionEngine",
    "UnauthorizedError",
    "create_profile",
    "load_profile",
    "reset_shared_engines",
    "shared_engine",
]

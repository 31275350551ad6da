"""dbveil: policy-driven protection of prepared statement parameters over DB-API drivers."""

from dbveil.connection import ProtectedConnection
from dbveil.cursor import ProtectedCursor
from dbveil.driver import connect, wrap
from dbveil.errors import (
    AdapterError,
    ConfigError,
    ConfigFormatError,
    ConfigNotFoundError,
    DbveilError,
    EngineError,
    IndexOutOfRange,
    InvalidArgument,
    ParameterError,
    UnauthorizedError,
)
from dbveil.params import UNSET, ParameterCache
from dbveil.statement import PreparedStatement

__all__ = [
    "UNSET",
    "AdapterError",
    "ConfigError",
    "ConfigFormatError",
    "ConfigNotFoundError",
    "DbveilError",
    "EngineError",
    "IndexOutOfRange",
    "InvalidArgument",
    "ParameterCache",
    "ParameterError",
    "PreparedStatement",
    "ProtectedConnection",
    "ProtectedCursor",
    "UnauthorizedError",
    "connect",
    "wrap",
]

"""Driver adapter protocol — the abstraction boundary between dbveil and DB-API drivers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from dbveil.errors import AdapterError

__all__ = [
    "AdapterError",
    "ConnectionConfig",
    "DriverAdapter",
    "DriverType",
    "NativeStatement",
]


class DriverType(enum.Enum):
    SQLITE = "sqlite"
    DUCKDB = "duckdb"
    POSTGRES = "postgres"


@dataclass
class ConnectionConfig:
    name: str
    driver: DriverType
    params: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class NativeStatement(Protocol):
    """A prepared statement of the underlying driver with per-ordinal binding."""

    sql: str

    def parameter_count(self) -> int: ...
    def bind(self, ordinal: int, value: object) -> None: ...
    def clear_parameters(self) -> None: ...
    def execute(self) -> Any:
        """Run the statement with the bound values; returns the driver cursor."""
        ...
    def update_count(self) -> int: ...
    def close(self) -> None: ...


@runtime_checkable
class DriverAdapter(Protocol):
    def connect(self, config: ConnectionConfig) -> Any: ...
    def prepare(self, cursor: Any, sql: str) -> NativeStatement: ...
    def driver_type(self) -> DriverType: ...
    def dialect(self) -> str: ...
    def error_class(self) -> type[Exception]: ...

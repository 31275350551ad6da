"""Driver adapters — implementations of the DriverAdapter protocol."""

from dbveil.adapters._base import (
    AdapterError,
    ConnectionConfig,
    DriverAdapter,
    DriverType,
    NativeStatement,
)
from dbveil.adapters._registry import get_adapter

__all__ = [
    "AdapterError",
    "ConnectionConfig",
    "DriverAdapter",
    "DriverType",
    "NativeStatement",
    "get_adapter",
]

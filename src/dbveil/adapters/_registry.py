"""Lazy adapter loading — imports driver modules only when needed."""

from __future__ import annotations

import importlib

from dbveil.adapters._base import AdapterError, DriverAdapter, DriverType

_ADAPTER_MAP: dict[DriverType, tuple[str, str]] = {
    DriverType.SQLITE: ("dbveil.adapters.sqlite", "SQLiteAdapter"),
    DriverType.DUCKDB: ("dbveil.adapters.duckdb", "DuckDBAdapter"),
    DriverType.POSTGRES: ("dbveil.adapters.postgres", "PostgresAdapter"),
}

_EXTRAS: dict[DriverType, str] = {
    DriverType.DUCKDB: "duckdb",
    DriverType.POSTGRES: "postgres",
}


def get_adapter(driver: DriverType) -> type[DriverAdapter]:
    """Lazy-load an adapter class by driver type.

    Raises AdapterError with install hint if the driver package is missing.
    """
    entry = _ADAPTER_MAP.get(driver)
    if entry is None:
        raise AdapterError(f"No adapter registered for {driver.value}")

    module_path, class_name = entry
    try:
        mod = importlib.import_module(module_path)
    except ImportError as e:
        extra = _EXTRAS.get(driver)
        hint = (
            f"Install with: pip install 'dbveil[{extra}]'"
            if extra
            else "This Python build does not ship the driver module."
        )
        raise AdapterError(f"Missing driver for {driver.value}. {hint}") from e

    return getattr(mod, class_name)

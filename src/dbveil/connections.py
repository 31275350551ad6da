"""Named connection management — ~/.dbveil/connections.toml."""

from __future__ import annotations

import os
import re
import stat
import tomllib
from pathlib import Path

from dbveil.adapters._base import AdapterError, ConnectionConfig, DriverType

_CONNECTIONS_FILE = Path.home() / ".dbveil" / "connections.toml"

# Keys consumed by dbveil itself rather than by the driver.
RESERVED_KEYS = ("policy", "profile")

_BARE_KEY = re.compile(r"[A-Za-z0-9_-]+")


def _escape_toml_value(v: str) -> str:
    """Escape a string for safe inclusion in a TOML double-quoted value."""
    return v.replace("\\", "\\\\").replace('"', '\\"')


def _toml_key(k: str) -> str:
    return k if _BARE_KEY.fullmatch(k) else f'"{_escape_toml_value(k)}"'


def _write_toml(data: dict[str, dict]) -> None:
    """Serialize connections dict to TOML and write with restricted permissions."""
    lines: list[str] = []
    for conn_name, entry in data.items():
        lines.append(f"[{_toml_key(conn_name)}]")
        for k, v in entry.items():
            lines.append(f'{_toml_key(k)} = "{_escape_toml_value(str(v))}"')
        lines.append("")

    _CONNECTIONS_FILE.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    _CONNECTIONS_FILE.write_text("\n".join(lines))
    os.chmod(_CONNECTIONS_FILE, stat.S_IRUSR | stat.S_IWUSR)  # 0600


def _load_file() -> dict:
    if not _CONNECTIONS_FILE.exists():
        return {}
    return tomllib.loads(_CONNECTIONS_FILE.read_text())


def list_connections() -> dict[str, dict]:
    """Return all named connections as {name: {type, ...params}}."""
    return _load_file()


def get_connection(name: str) -> ConnectionConfig | None:
    """Look up a named connection. Returns None if not found."""
    data = _load_file()
    if name not in data:
        return None

    entry = data[name]
    driver_str = entry.get("type")
    if driver_str is None:
        return None

    try:
        driver = DriverType(driver_str)
    except ValueError:
        return None

    params = {k: str(v) for k, v in entry.items() if k != "type"}
    return ConnectionConfig(name=name, driver=driver, params=params)


def save_connection(name: str, driver: str, params: dict[str, str]) -> Path:
    """Save a named connection to the config file."""
    data = _load_file()
    data[name] = {"type": driver, **params}
    _write_toml(data)
    return _CONNECTIONS_FILE


def remove_connection(name: str) -> bool:
    """Remove a named connection. Returns True if removed, False if not found."""
    data = _load_file()
    if name not in data:
        return False
    del data[name]
    if not data:
        _CONNECTIONS_FILE.unlink(missing_ok=True)
    else:
        _write_toml(data)
    return True


def parse_target(value: str) -> ConnectionConfig:
    """Resolve a target: named connection first, then 'type:key=val,key=val'."""
    config = get_connection(value)
    if config is not None:
        return config

    if ":" not in value:
        raise AdapterError(
            f"Connection '{value}' not found in ~/.dbveil/connections.toml "
            f"and not in 'type:key=val' format."
        )
    driver_str, params_str = value.split(":", 1)

    try:
        driver = DriverType(driver_str)
    except ValueError as e:
        valid = ", ".join(t.value for t in DriverType)
        raise AdapterError(f"Unknown driver type '{driver_str}'. Valid: {valid}") from e

    params: dict[str, str] = {}
    if params_str:
        for part in params_str.split(","):
            if "=" not in part:
                raise AdapterError(f"Expected key=value pair, got '{part}'")
            k, v = part.split("=", 1)
            params[k.strip()] = v.strip()

    return ConnectionConfig(name=driver_str, driver=driver, params=params)

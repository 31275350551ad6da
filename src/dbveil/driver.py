"""Entry points: open a protected connection, or wrap one you already have."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dbveil.adapters import ConnectionConfig, DriverType, get_adapter
from dbveil.connection import ProtectedConnection
from dbveil.connections import RESERVED_KEYS, parse_target
from dbveil.engine import ProtectionEngine, shared_engine
from dbveil.policy import PolicyResolver
from dbveil.policy.resolve import ConfigSource


def _resolver(policy: ConfigSource | PolicyResolver) -> PolicyResolver:
    if isinstance(policy, PolicyResolver):
        return policy
    if isinstance(policy, str) and not policy.lstrip().startswith("{"):
        # A bare string that is not a JSON object is a file path.
        policy = Path(policy).expanduser()
    return PolicyResolver(policy)


def connect(
    target: str | ConnectionConfig,
    *,
    policy: ConfigSource | PolicyResolver = None,
    engine: ProtectionEngine | None = None,
    profile: str | os.PathLike | None = None,
) -> ProtectedConnection:
    """Open a driver connection and interpose the protection layer.

    ``target`` is a ConnectionConfig, a named connection, or a raw
    ``type:key=val`` string. ``policy`` and ``profile`` default to the
    connection's own ``policy`` / ``profile`` params. Without an explicit
    engine, the process-wide engine for the profile is used.
    """
    config = target if isinstance(target, ConnectionConfig) else parse_target(target)

    if policy is None:
        policy = config.params.get("policy")
    resolver = _resolver(policy)

    if engine is None:
        engine = shared_engine(profile or config.params.get("profile"))

    driver_params = {k: v for k, v in config.params.items() if k not in RESERVED_KEYS}
    adapter = get_adapter(config.driver)()
    raw = adapter.connect(ConnectionConfig(config.name, config.driver, driver_params))
    return ProtectedConnection(raw, adapter, engine, resolver, name=config.name)


def wrap(
    raw: Any,
    driver: DriverType | str,
    *,
    engine: ProtectionEngine,
    policy: ConfigSource | PolicyResolver = None,
) -> ProtectedConnection:
    """Interpose the protection layer over an already open DB-API connection."""
    adapter = get_adapter(DriverType(driver))()
    return ProtectedConnection(raw, adapter, engine, _resolver(policy))

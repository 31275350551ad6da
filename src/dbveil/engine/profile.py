"""Engine profiles — secret material on disk, and the process-wide shared engine."""

from __future__ import annotations

import base64
import json
import os
import secrets
import stat
import threading
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from dbveil.engine.local import KEY_SIZE, LocalEngine
from dbveil.errors import EngineError

DEFAULT_PROFILE = Path.home() / ".dbveil" / "profile.json"
PROFILE_ENV = "DBVEIL_PROFILE"


@dataclass(frozen=True)
class Profile:
    profile_id: str
    secret: bytes = field(repr=False)
    created: str = ""
    deny: dict[str, list[str]] = field(default_factory=dict)

    def engine(self) -> LocalEngine:
        return LocalEngine(self.secret, deny=self.deny, profile_id=self.profile_id)


def resolve_location(location: str | os.PathLike | None = None) -> Path:
    """Explicit location → $DBVEIL_PROFILE → ~/.dbveil/profile.json."""
    if location is None:
        location = os.environ.get(PROFILE_ENV) or DEFAULT_PROFILE
    return Path(location).expanduser()


def create_profile(
    location: str | os.PathLike | None = None,
    *,
    deny: dict[str, list[str]] | None = None,
    overwrite: bool = False,
) -> Path:
    """Write a new profile with a random secret (mode 600). Returns its path."""
    path = resolve_location(location)
    if path.exists() and not overwrite:
        raise EngineError(f"profile already exists: {path}")

    data = {
        "profile_id": uuid.uuid4().hex,
        "created": datetime.now(UTC).isoformat(),
        "secret": base64.b64encode(secrets.token_bytes(KEY_SIZE)).decode("ascii"),
        "deny": deny or {},
    }
    path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    path.write_text(json.dumps(data, indent=2))
    os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)  # 0600
    return path


def load_profile(location: str | os.PathLike | None = None) -> Profile:
    path = resolve_location(location)
    if not path.exists():
        raise EngineError(f"profile not found: {path}")
    try:
        data = json.loads(path.read_text())
        secret = base64.b64decode(data["secret"], validate=True)
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise EngineError(f"profile {path} is malformed: {e}") from e

    deny = data.get("deny") or {}
    if not isinstance(deny, dict) or not all(isinstance(v, list) for v in deny.values()):
        raise EngineError(f"profile {path} has a malformed 'deny' section")

    return Profile(
        profile_id=str(data.get("profile_id", "")),
        secret=secret,
        created=str(data.get("created", "")),
        deny=deny,
    )


_shared: dict[Path, LocalEngine] = {}
_shared_lock = threading.Lock()


def shared_engine(location: str | os.PathLike | None = None) -> LocalEngine:
    """Process-wide engine for a profile, loaded on first use.

    Double-checked: the lock is only taken while the engine for this location
    has not been created yet.
    """
    path = resolve_location(location).resolve()
    engine = _shared.get(path)
    if engine is None:
        with _shared_lock:
            engine = _shared.get(path)
            if engine is None:
                engine = load_profile(path).engine()
                _shared[path] = engine
    return engine


def reset_shared_engines() -> None:
    with _shared_lock:
        _shared.clear()

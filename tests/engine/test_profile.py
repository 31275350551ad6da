"""Test engine profiles and the process-wide shared engine."""

import json
import stat
from unittest.mock import patch

import pytest

from dbveil.engine import (
    EngineError,
    LocalEngine,
    create_profile,
    load_profile,
    reset_shared_engines,
    shared_engine,
)
from dbveil.engine.profile import resolve_location
from dbveil.policy import ColumnProtectionPolicy

PII = ColumnProtectionPolicy.from_mapping({"classification": ["pii"]})


@pytest.fixture(autouse=True)
def _fresh_shared_engines():
    reset_shared_engines()
    yield
    reset_shared_engines()


def test_create_profile_writes_restricted_file(tmp_path):
    path = create_profile(tmp_path / "nested" / "profile.json")
    assert path.exists()
    assert stat.S_IMODE(path.stat().st_mode) == 0o600

    data = json.loads(path.read_text())
    assert set(data) == {"profile_id", "created", "secret", "deny"}
    assert data["deny"] == {}


def test_create_profile_refuses_overwrite(tmp_path):
    path = create_profile(tmp_path / "profile.json")
    original = path.read_text()
    with pytest.raises(EngineError, match="already exists"):
        create_profile(path)
    assert path.read_text() == original

    create_profile(path, overwrite=True)
    assert path.read_text() != original


def test_load_profile_round_trip(tmp_path):
    path = create_profile(tmp_path / "profile.json", deny={"classification": ["restricted"]})
    profile = load_profile(path)
    assert len(profile.secret) == 32
    assert profile.deny == {"classification": ["restricted"]}
    assert profile.profile_id
    assert "secret" not in repr(profile)

    engine = profile.engine()
    assert isinstance(engine, LocalEngine)
    assert engine.profile_id == profile.profile_id
    assert engine.unprotect(engine.protect("Jane", PII))[0] == "Jane"


def test_profiles_do_not_share_keys(tmp_path):
    a = load_profile(create_profile(tmp_path / "a.json")).engine()
    b = load_profile(create_profile(tmp_path / "b.json")).engine()
    with pytest.raises(EngineError):
        b.unprotect(a.protect("Jane", PII))


def test_load_missing_profile(tmp_path):
    with pytest.raises(EngineError, match="not found"):
        load_profile(tmp_path / "missing.json")


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "{}",
        '{"secret": "***"}',
        '{"secret": "AAAA", "deny": {"classification": "pii"}}',
    ],
)
def test_load_malformed_profile(tmp_path, content):
    path = tmp_path / "profile.json"
    path.write_text(content)
    with pytest.raises(EngineError, match="malformed"):
        load_profile(path)


def test_resolve_location_order(tmp_path, monkeypatch):
    monkeypatch.delenv("DBVEIL_PROFILE", raising=False)
    with patch("dbveil.engine.profile.DEFAULT_PROFILE", tmp_path / "default.json"):
        assert resolve_location() == tmp_path / "default.json"
        monkeypatch.setenv("DBVEIL_PROFILE", str(tmp_path / "env.json"))
        assert resolve_location() == tmp_path / "env.json"
        assert resolve_location(tmp_path / "explicit.json") == tmp_path / "explicit.json"


def test_shared_engine_is_loaded_once(tmp_path):
    path = create_profile(tmp_path / "profile.json")
    first = shared_engine(path)
    assert shared_engine(str(path)) is first

    with patch("dbveil.engine.profile.load_profile") as loader:
        assert shared_engine(path) is first
        loader.assert_not_called()


def test_shared_engine_reset(tmp_path):
    path = create_profile(tmp_path / "profile.json")
    first = shared_engine(path)
    reset_shared_engines()
    assert shared_engine(path) is not first


def test_shared_engine_missing_profile(tmp_path):
    with pytest.raises(EngineError):
        shared_engine(tmp_path / "missing.json")

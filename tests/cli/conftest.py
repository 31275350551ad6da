"""CLI test fixtures: isolated connection file, audit log root and engine profile."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from fakes import PERSONNEL_POLICY

from dbveil.engine import create_profile, reset_shared_engines


@pytest.fixture(autouse=True)
def isolated_home(tmp_path):
    with patch("dbveil.connections._CONNECTIONS_FILE", tmp_path / "connections.toml"), patch(
        "dbveil.auditlog._LOG_ROOT", tmp_path / "logs"
    ):
        reset_shared_engines()
        yield tmp_path
        reset_shared_engines()


@pytest.fixture
def profile_path(tmp_path):
    return create_profile(tmp_path / "profile.json")


@pytest.fixture
def policy_path(tmp_path):
    path = tmp_path / "policy.json"
    path.write_text(json.dumps(PERSONNEL_POLICY))
    return path

"""Root conftest — shared fixtures and markers."""

from __future__ import annotations

import os

import pytest
from fakes import PERSONNEL_INSERT, PERSONNEL_POLICY, FakeNativeStatement, RecordingEngine

from dbveil.engine import LocalEngine
from dbveil.policy import PolicyResolver
from dbveil.statement import PreparedStatement


def pytest_configure(config):
    config.addinivalue_line("markers", "postgres: requires running PostgreSQL server")


def pytest_collection_modifyitems(config, items):
    if os.environ.get("DBVEIL_TEST_POSTGRES"):
        return

    skip_pg = pytest.mark.skip(reason="Postgres not available (set DBVEIL_TEST_POSTGRES=1)")
    for item in items:
        if "postgres" in item.keywords:
            item.add_marker(skip_pg)


@pytest.fixture
def recording_engine():
    return RecordingEngine()


@pytest.fixture
def local_engine():
    return LocalEngine(bytes(range(32)), profile_id="test")


@pytest.fixture
def make_statement(recording_engine):
    """Build a PreparedStatement over a FakeNativeStatement."""

    def _make(sql=PERSONNEL_INSERT, count=4, config=PERSONNEL_POLICY, engine=None):
        native = FakeNativeStatement(sql, count)
        policy = PolicyResolver(config).resolve(sql)
        statement = PreparedStatement(native, policy, engine or recording_engine)
        return statement, native

    return _make

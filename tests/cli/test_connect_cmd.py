"""Test the connect CLI command group."""

import json

from click.testing import CliRunner

from dbveil.cli import main
from dbveil.connections import get_connection


def test_add_list_remove(policy_path, profile_path) -> None:
    runner = CliRunner()
    result = runner.invoke(main, [
        "connect", "add", "hr", "postgres",
        "dsn=postgresql://app:hunter2@db:5432/hr",
        f"policy={policy_path}", f"profile={profile_path}",
    ])
    assert result.exit_code == 0, result.output
    assert "Saved connection 'hr'" in result.output
    assert get_connection("hr").params["policy"] == str(policy_path.resolve())

    result = runner.invoke(main, ["connect", "list"])
    assert result.exit_code == 0
    assert "hr (postgres)" in result.output
    assert "hunter2" not in result.output
    assert "app:****@db" in result.output
    assert f"policy: {policy_path.resolve()}" in result.output
    assert f"profile: {profile_path.resolve()}" in result.output

    result = runner.invoke(main, ["connect", "remove", "hr"])
    assert result.exit_code == 0
    assert get_connection("hr") is None


def test_list_shows_missing_policy_and_default_profile() -> None:
    runner = CliRunner()
    runner.invoke(main, ["connect", "add", "scratch", "duckdb", "path=:memory:"])
    result = runner.invoke(main, ["connect", "list"])
    assert "scratch (duckdb): path=:memory:" in result.output
    assert "policy: none (no statement is protected)" in result.output
    assert "profile: default" in result.output


def test_list_empty() -> None:
    result = CliRunner().invoke(main, ["connect", "list"])
    assert result.exit_code == 0
    assert "No connections configured." in result.output


def test_remove_unknown() -> None:
    result = CliRunner().invoke(main, ["connect", "remove", "ghost"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_add_rejects_unknown_driver() -> None:
    result = CliRunner().invoke(main, ["connect", "add", "x", "oracle", "dsn=x"])
    assert result.exit_code == 2


def test_add_rejects_malformed_param() -> None:
    result = CliRunner().invoke(main, ["connect", "add", "x", "sqlite", "path"])
    assert result.exit_code == 2
    assert "Expected key=value" in result.output


def test_add_rejects_missing_policy(tmp_path) -> None:
    result = CliRunner().invoke(main, [
        "connect", "add", "x", "sqlite", f"policy={tmp_path / 'missing.json'}",
    ])
    assert result.exit_code == 1
    assert "is not usable" in result.output
    assert get_connection("x") is None


def test_add_rejects_malformed_policy(tmp_path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"PreparedStatement": {"SELECT ?": {"IonicColumns": {"0": {}}}}}))
    result = CliRunner().invoke(main, ["connect", "add", "x", "sqlite", f"policy={path}"])
    assert result.exit_code == 1
    assert "positive integer ordinal" in result.output
    assert get_connection("x") is None


def test_add_rejects_missing_profile(tmp_path) -> None:
    result = CliRunner().invoke(main, [
        "connect", "add", "x", "sqlite", f"profile={tmp_path / 'nope.json'}",
    ])
    assert result.exit_code == 1
    assert "profile not found" in result.output
    assert get_connection("x") is None


def test_add_no_check_keeps_paths_as_given() -> None:
    result = CliRunner().invoke(main, [
        "connect", "add", "x", "sqlite", "policy=later.json", "--no-check",
    ])
    assert result.exit_code == 0
    assert get_connection("x").params["policy"] == "later.json"


def test_named_connection_used_by_exec(tmp_path, profile_path) -> None:
    runner = CliRunner()
    runner.invoke(main, [
        "connect", "add", "local", "sqlite",
        f"path={tmp_path / 'app.db'}", f"profile={profile_path}",
    ])
    result = runner.invoke(main, ["exec", "SELECT 1 AS one", "--db", "local", "--no-log"])
    assert result.exit_code == 0, result.output
    assert "one" in result.output

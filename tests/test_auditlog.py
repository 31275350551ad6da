"""Test audit logging — daily JSONL files with retention cleanup."""

import json
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from dbveil.auditlog import _project_slug, cleanup_old_logs, log_execution


def test_project_slug_encodes_cwd():
    with patch("dbveil.auditlog.os.getcwd", return_value="/Users/jane/projects/hr"):
        slug = _project_slug()
    assert slug == "Users-jane-projects-hr"


def test_log_execution_creates_file(tmp_path):
    with patch("dbveil.auditlog._LOG_ROOT", tmp_path), patch(
        "dbveil.auditlog.os.getcwd", return_value="/test/project"
    ):
        log_execution(
            sql="INSERT INTO personnel (first) VALUES (?)",
            db="hr",
            parameter_count=1,
            protected=[1],
            row_count=1,
        )

    project_dir = tmp_path / "test-project"
    log_files = list(project_dir.glob("*.jsonl"))
    assert len(log_files) == 1

    today = datetime.now(UTC).strftime("%Y-%m-%d")
    assert log_files[0].name == f"{today}.jsonl"

    entry = json.loads(log_files[0].read_text().strip())
    assert entry["sql"] == "INSERT INTO personnel (first) VALUES (?)"
    assert entry["db"] == "hr"
    assert entry["protected"] == [1]
    assert entry["error"] is None
    assert "ts" in entry


def test_log_execution_appends(tmp_path):
    with patch("dbveil.auditlog._LOG_ROOT", tmp_path), patch(
        "dbveil.auditlog.os.getcwd", return_value="/test/project"
    ):
        log_execution(sql="SELECT 1")
        log_execution(sql="SELECT 2", error="no such table: t")

    [log_file] = list((tmp_path / "test-project").glob("*.jsonl"))
    lines = log_file.read_text().strip().splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0])["protected"] == []
    assert json.loads(lines[1])["error"] == "no such table: t"


def test_cleanup_old_logs(tmp_path):
    project_dir = tmp_path / "test-project"
    project_dir.mkdir()

    old_date = (datetime.now(UTC) - timedelta(days=45)).strftime("%Y-%m-%d")
    recent_date = (datetime.now(UTC) - timedelta(days=5)).strftime("%Y-%m-%d")
    (project_dir / f"{old_date}.jsonl").write_text("{}\n")
    (project_dir / f"{recent_date}.jsonl").write_text("{}\n")
    (project_dir / "notes.jsonl").write_text("{}\n")

    with patch("dbveil.auditlog._LOG_ROOT", tmp_path), patch(
        "dbveil.auditlog.os.getcwd", return_value="/test/project"
    ):
        deleted = cleanup_old_logs(retention_days=30)

    assert deleted == 1
    assert not (project_dir / f"{old_date}.jsonl").exists()
    assert (project_dir / f"{recent_date}.jsonl").exists()
    assert (project_dir / "notes.jsonl").exists()


def test_cleanup_no_log_dir(tmp_path):
    with patch("dbveil.auditlog._LOG_ROOT", tmp_path), patch(
        "dbveil.auditlog.os.getcwd", return_value="/nonexistent"
    ):
        assert cleanup_old_logs() == 0

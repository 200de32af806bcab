"""Unit tests for _logger.py: command history and run logs."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING
from unittest.mock import patch

from lxcsite._logger import RunLogger, _safe_timestamp, default_log_dir
from lxcsite.types import CommandResult

if TYPE_CHECKING:
    from pathlib import Path

STARTED = datetime(2026, 2, 10, 14, 30, 0, tzinfo=timezone.utc)

# --- _safe_timestamp ---


def test_safe_timestamp() -> None:
    ts = _safe_timestamp(STARTED)
    assert ":" not in ts
    assert "+" not in ts
    assert "2026-02-10T14-30-00" in ts


def test_default_log_dir(tmp_path: Path) -> None:
    with patch("lxcsite._logger.Path.home", return_value=tmp_path):
        assert default_log_dir() == tmp_path / ".lxcsite" / "logs"


# --- RunLogger ---


def test_logger_enabled_by_default(tmp_path: Path) -> None:
    assert RunLogger(tmp_path).enabled is True


def test_log_command_appends_history(tmp_path: Path) -> None:
    logger = RunLogger(tmp_path / "logs")
    result = CommandResult(("pct", "status", "100"), 2, stderr="missing\n", duration_ms=12.34)

    logger.log_command(result, STARTED)
    logger.log_command(CommandResult(("pct", "start", "100"), 0), STARTED)

    lines = (tmp_path / "logs" / "history.jsonl").read_text().splitlines()
    assert len(lines) == 2
    entry = json.loads(lines[0])
    assert entry["command"] == "pct status 100"
    assert entry["exit_code"] == 2
    assert entry["duration_ms"] == 12.3
    assert entry["timestamp"] == STARTED.isoformat()


def test_history_quotes_arguments(tmp_path: Path) -> None:
    logger = RunLogger(tmp_path)
    logger.log_command(CommandResult(("pct", "exec", "1", "--", "sh", "-c", "a b"), 0), STARTED)
    entry = json.loads((tmp_path / "history.jsonl").read_text())
    assert entry["command"] == "pct exec 1 -- sh -c 'a b'"


def test_start_run_writes_output(tmp_path: Path) -> None:
    logger = RunLogger(tmp_path)
    log_path = logger.start_run(STARTED)
    assert log_path is not None
    assert log_path.name.startswith("run-2026-02-10T14-30-00")

    logger.log_command(
        CommandResult(("pveam", "list", "local"), 0, stdout="NAME SIZE\n", stderr="warn\n"),
        STARTED,
    )
    logger.close()

    content = log_path.read_text()
    assert "$ pveam list local" in content
    assert "# exit_code: 0" in content
    assert "--- stdout ---\nNAME SIZE" in content
    assert "--- stderr ---\nwarn" in content


def test_close_is_idempotent(tmp_path: Path) -> None:
    logger = RunLogger(tmp_path)
    logger.start_run(STARTED)
    logger.close()
    logger.close()


def test_disabled_logger_writes_nothing(tmp_path: Path) -> None:
    logs = tmp_path / "logs"
    logger = RunLogger(logs, enabled=False)
    assert logger.start_run(STARTED) is None
    logger.log_command(CommandResult(("pct",), 0), STARTED)
    logger.append_history({"x": 1})
    assert not logs.exists()

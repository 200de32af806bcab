# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Fire-and-forget logging to disk for host commands.

All I/O is synchronous filesystem writes, one JSONL line per command plus a
per-run log file holding full command output.
"""

from __future__ import annotations

import json
import shlex
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import datetime
    from typing import TextIO

    from lxcsite.types import CommandResult


def default_log_dir() -> Path:
    """Return ``~/.lxcsite/logs``."""
    return Path.home() / ".lxcsite" / "logs"


class RunLogger:
    """Logs host commands and their output to a ``logs/`` directory."""

    def __init__(self, logs_dir: Path | None = None, *, enabled: bool = True) -> None:
        self._logs_dir = logs_dir if logs_dir is not None else default_log_dir()
        self._history_path = self._logs_dir / "history.jsonl"
        self._enabled = enabled
        self._handle: TextIO | None = None

    @property
    def enabled(self) -> bool:
        """Whether logging is active."""
        return self._enabled

    @property
    def logs_dir(self) -> Path:
        return self._logs_dir

    def start_run(self, started_at: datetime.datetime) -> Path | None:
        """Open a ``run-<timestamp>.log`` file for this provisioning run."""
        if not self._enabled:
            return None
        self._logs_dir.mkdir(parents=True, exist_ok=True)
        log_path = self._logs_dir / f"run-{_safe_timestamp(started_at)}.log"
        self._handle = log_path.open("a")
        self._handle.write(f"# started_at: {started_at.isoformat()}\n\n")
        return log_path

    def log_command(self, result: CommandResult, started_at: datetime.datetime) -> None:
        """Write one command's output to the run log and append to history."""
        if not self._enabled:
            return
        command = shlex.join(result.argv)
        if self._handle is not None:
            lines = [
                f"$ {command}",
                f"# exit_code: {result.exit_code}",
                f"# duration_ms: {result.duration_ms:.1f}",
            ]
            if result.stdout:
                lines.append("--- stdout ---")
                lines.append(result.stdout.rstrip("\n"))
            if result.stderr:
                lines.append("--- stderr ---")
                lines.append(result.stderr.rstrip("\n"))
            self._handle.write("\n".join(lines) + "\n\n")
            self._handle.flush()

        self.append_history(
            {
                "command": command,
                "exit_code": result.exit_code,
                "duration_ms": round(result.duration_ms, 1),
                "timestamp": started_at.isoformat(),
            }
        )

    def append_history(self, entry: dict[str, object]) -> None:
        """Append one JSONL line to ``history.jsonl``."""
        if not self._enabled:
            return
        self._logs_dir.mkdir(parents=True, exist_ok=True)
        with self._history_path.open("a") as f:
            f.write(json.dumps(entry, default=str) + "\n")

    def close(self) -> None:
        """Close the run log file."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None


def _safe_timestamp(dt: datetime.datetime) -> str:
    """Format a datetime as a filesystem-safe ISO timestamp."""
    return dt.isoformat().replace(":", "-").replace("+", "p")

# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Blocking execution of host commands."""

from __future__ import annotations

import subprocess  # nosec B404
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from lxcsite.types import CommandResult

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from lxcsite._logger import RunLogger

_DEFAULT_TIMEOUT = 600


class HostRunner:
    """Runs host commands synchronously and records each one.

    Every call blocks until the process exits.  A missing executable or a
    timeout is reported as a failed :class:`CommandResult` (exit code 127 or
    124) so callers only ever inspect the exit status.
    """

    def __init__(
        self,
        logger: RunLogger | None = None,
        *,
        echo: Callable[[str], None] | None = None,
        timeout: int = _DEFAULT_TIMEOUT,
    ) -> None:
        self._logger = logger
        self._echo = echo
        self._timeout = timeout

    def run(self, argv: Sequence[str], *, timeout: int | None = None) -> CommandResult:
        """Run *argv* and return its captured result."""
        args = tuple(str(a) for a in argv)
        if self._echo is not None:
            self._echo(" ".join(args))

        started_at = datetime.now(tz=timezone.utc)
        start = time.monotonic()
        try:
            proc = subprocess.run(  # noqa: S603  # nosec B603
                args,
                capture_output=True,
                text=True,
                check=False,
                timeout=timeout or self._timeout,
            )
            exit_code, stdout, stderr = proc.returncode, proc.stdout, proc.stderr
        except FileNotFoundError as exc:
            exit_code, stdout, stderr = 127, "", str(exc)
        except subprocess.TimeoutExpired:
            exit_code, stdout, stderr = 124, "", f"timed out after {timeout or self._timeout}s"

        result = CommandResult(
            argv=args,
            exit_code=exit_code,
            stdout=stdout or "",
            stderr=stderr or "",
            duration_ms=(time.monotonic() - start) * 1000,
        )
        if self._logger is not None:
            self._logger.log_command(result, started_at)
        return result

# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class LxcSiteError(Exception):
    """Base exception for all lxcsite errors."""


class PreconditionError(LxcSiteError):
    """Failure detected before any mutating action on the host."""


class NotRoot(PreconditionError):
    """Process is not running with root privileges."""

    def __init__(self) -> None:
        super().__init__("This tool must be run as root on your Proxmox host")


class ToolMissing(PreconditionError):
    """A required host command is not on PATH."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"Required command not found: {tool}. Is this a Proxmox VE host?")


class NoTemplatesAvailable(PreconditionError):
    """No cached templates and nothing downloadable."""

    def __init__(self) -> None:
        super().__init__("No templates found locally and none available for download")


class InvalidSelection(PreconditionError):
    """Operator answered a selection prompt with an out-of-range or non-numeric value."""

    def __init__(self, choice: str, count: int) -> None:
        self.choice = choice
        self.count = count
        super().__init__(f"Invalid selection {choice!r}: expected a number from 1 to {count}")


class ConfigError(PreconditionError):
    """Configuration value could not be used."""


class IdentifierExhausted(PreconditionError):
    """Every container id in the search window is taken."""

    def __init__(self, base: int, window: int) -> None:
        self.base = base
        self.window = window
        super().__init__(f"No free container id in range {base}-{base + window - 1}")


class ExecutionError(LxcSiteError):
    """Failure of an external command after mutation has begun."""


class CommandFailed(ExecutionError):
    """An external command exited non-zero."""

    def __init__(
        self,
        step: str,
        argv: Sequence[str] = (),
        exit_code: int = 1,
        stderr: str = "",
    ) -> None:
        self.step = step
        self.argv = tuple(argv)
        self.exit_code = exit_code
        self.stderr = stderr
        msg = f"{step} failed (exit code {exit_code})"
        if stderr.strip():
            msg = f"{msg}: {stderr.strip()}"
        super().__init__(msg)


class ContainerCreateFailed(CommandFailed):
    """``pct create`` exited non-zero."""


class TemplateDownloadFailed(CommandFailed):
    """``pveam download`` exited non-zero."""


class NetworkTimeout(ExecutionError):
    """Guest never became reachable within the attempt budget."""

    def __init__(self, ctid: int, attempts: int) -> None:
        self.ctid = ctid
        self.attempts = attempts
        super().__init__(f"Network not available in container {ctid} after {attempts} attempts")


class UnsupportedGuest(ExecutionError):
    """Started guest runs an OS family with no capability entry."""

    def __init__(self, family: str) -> None:
        self.family = family
        super().__init__(f"Unsupported guest OS: {family or 'unknown'}")


class ProvisionCancelled(LxcSiteError):
    """Operator cancelled before any mutating action."""

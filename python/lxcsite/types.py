# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True)
class CommandResult:
    """Result of running a host command (including ``pct exec`` into a guest)."""

    argv: tuple[str, ...]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """Return True if the command exited successfully (exit code 0)."""
        return self.exit_code == 0


@dataclasses.dataclass(frozen=True)
class ProvisionSummary:
    """Operator-facing outcome of a completed provisioning run."""

    ctid: int
    hostname: str
    ip_address: str = ""
    template: str = ""
    guest_family: str = ""

    @property
    def url(self) -> str:
        """Return the site URL, with a placeholder when the address is unknown."""
        return f"http://{self.ip_address or '<ip-address>'}/"

    @property
    def update_command(self) -> str:
        return f"pct exec {self.ctid} -- update-site"

    @property
    def enter_command(self) -> str:
        return f"pct enter {self.ctid}"

# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Thin wrapper over the Proxmox ``pct``, ``pvesm`` and ``pveam`` command surface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lxcsite.types import CommandResult

HOST_TOOLS = ("pct", "pvesm", "pveam")


class Runner(Protocol):
    def run(self, argv: Sequence[str], *, timeout: int | None = None) -> CommandResult: ...


def table_column(output: str, index: int, *, skip_header: bool = True) -> list[str]:
    """Return the whitespace-separated column *index* from tabular CLI output.

    Blank lines and rows too short to have the column are skipped.
    """
    lines = output.splitlines()
    if skip_header:
        lines = lines[1:]
    values: list[str] = []
    for line in lines:
        fields = line.split()
        if len(fields) > index:
            values.append(fields[index])
    return values


class PctClient:
    """Host-side container manager commands.  Every method blocks until the command exits."""

    def __init__(self, runner: Runner) -> None:
        self._runner = runner

    # --- containers ---

    def exists(self, ctid: int) -> bool:
        """Return True if ``pct status`` finds container *ctid*."""
        return self._runner.run(["pct", "status", str(ctid)]).ok

    def create(self, ctid: int, template: str, options: Sequence[str]) -> CommandResult:
        return self._runner.run(["pct", "create", str(ctid), template, *options])

    def start(self, ctid: int) -> CommandResult:
        return self._runner.run(["pct", "start", str(ctid)])

    def exec(self, ctid: int, *argv: str, timeout: int | None = None) -> CommandResult:
        """Run *argv* inside the guest via ``pct exec``."""
        return self._runner.run(["pct", "exec", str(ctid), "--", *argv], timeout=timeout)

    def push(self, ctid: int, local: str, remote: str, *, perms: str = "0644") -> CommandResult:
        """Copy a host file into the guest."""
        return self._runner.run(["pct", "push", str(ctid), local, remote, "--perms", perms])

    # --- storage ---

    def storages(self) -> list[str]:
        """Return the names of all storages known to ``pvesm``."""
        result = self._runner.run(["pvesm", "status"])
        return table_column(result.stdout, 0) if result.ok else []

    def template_storages(self) -> list[str]:
        """Return the names of storages that can hold container templates."""
        result = self._runner.run(["pvesm", "status", "--content", "vztmpl"])
        return table_column(result.stdout, 0) if result.ok else []

    # --- templates ---

    def list_templates(self, storage: str) -> list[str]:
        """Return volume ids of templates cached on *storage*."""
        result = self._runner.run(["pveam", "list", storage])
        return table_column(result.stdout, 0) if result.ok else []

    def update_catalog(self) -> CommandResult:
        return self._runner.run(["pveam", "update"])

    def available_templates(self) -> list[str]:
        """Return template names from the remote catalog (``pveam available``)."""
        result = self._runner.run(["pveam", "available"])
        return table_column(result.stdout, 1, skip_header=False) if result.ok else []

    def download(self, storage: str, name: str) -> CommandResult:
        return self._runner.run(["pveam", "download", storage, name])

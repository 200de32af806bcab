"""Shared fixtures for lxcsite tests.

No test touches a real Proxmox host: ``FakeHost`` answers the ``pct``,
``pvesm`` and ``pveam`` commands the tool issues and records every call.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from lxcsite.pct import PctClient
from lxcsite.types import CommandResult

if TYPE_CHECKING:
    from collections.abc import Sequence

ALPINE_OS_RELEASE = 'NAME="Alpine Linux"\nID=alpine\nVERSION_ID=3.19.1\n'
DEBIAN_OS_RELEASE = 'PRETTY_NAME="Debian GNU/Linux 12 (bookworm)"\nID=debian\n'
UBUNTU_OS_RELEASE = "NAME=Ubuntu\nID=ubuntu\nID_LIKE=debian\n"

ALPINE_TEMPLATE = "local:vztmpl/alpine-3.19-default_20240207_amd64.tar.xz"


def ip_addr_output(address: str) -> str:
    return (
        "2: eth0@if12: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 state UP\n"
        f"    inet {address}/24 brd 192.168.1.255 scope global dynamic eth0\n"
        "       valid_lft 86239sec preferred_lft 86239sec\n"
    )


@dataclasses.dataclass
class FakeHost:
    """Scripted stand-in for a Proxmox host, usable as a ``Runner``."""

    existing: set[int] = dataclasses.field(default_factory=set)
    template_storages: dict[str, list[str]] = dataclasses.field(default_factory=dict)
    all_storages: list[str] = dataclasses.field(default_factory=lambda: ["local", "local-lvm"])
    catalog: list[str] = dataclasses.field(default_factory=list)
    os_release: str = ALPINE_OS_RELEASE
    dhcp_address: str = "192.168.1.77"
    probe_failures: int = 0
    fail: dict[tuple[str, ...], int] = dataclasses.field(default_factory=dict)
    calls: list[tuple[str, ...]] = dataclasses.field(default_factory=list)
    pushed: dict[str, tuple[str, str]] = dataclasses.field(default_factory=dict)

    def run(
        self,
        argv: Sequence[str],
        *,
        timeout: int | None = None,  # noqa: ARG002
    ) -> CommandResult:
        args = tuple(str(a) for a in argv)
        self.calls.append(args)
        for prefix, code in self.fail.items():
            if args[: len(prefix)] == prefix:
                return CommandResult(args, code, stderr="simulated failure")
        return self._dispatch(args)

    def commands(self, *prefix: str) -> list[tuple[str, ...]]:
        """Return recorded calls that start with *prefix*."""
        return [c for c in self.calls if c[: len(prefix)] == prefix]

    def guest_commands(self) -> list[tuple[str, ...]]:
        """Return the argv of every ``pct exec`` call, without the ``pct exec N --`` part."""
        return [c[4:] for c in self.commands("pct", "exec")]

    def _dispatch(self, args: tuple[str, ...]) -> CommandResult:  # noqa: PLR0911
        ok = CommandResult(args, 0)
        match args:
            case ("pct", "status", ctid):
                if int(ctid) in self.existing:
                    return CommandResult(args, 0, stdout="status: stopped\n")
                missing = f"Configuration file 'nodes/pve/lxc/{ctid}.conf' does not exist\n"
                return CommandResult(args, 2, stderr=missing)
            case ("pvesm", "status", "--content", "vztmpl"):
                return CommandResult(args, 0, stdout=_storage_table(list(self.template_storages)))
            case ("pvesm", "status"):
                return CommandResult(args, 0, stdout=_storage_table(self.all_storages))
            case ("pveam", "list", storage):
                rows = "".join(f"{v:<60} 3.10MB\n" for v in self.template_storages.get(storage, []))
                return CommandResult(args, 0, stdout=f"{'NAME':<60} SIZE\n{rows}")
            case ("pveam", "available"):
                rows = "".join(f"system          {name}\n" for name in self.catalog)
                return CommandResult(args, 0, stdout=rows)
            case ("pct", "create", ctid, *_):
                self.existing.add(int(ctid))
                return ok
            case ("pct", "push", _, local, remote, "--perms", perms):
                self.pushed[remote] = (Path(local).read_text(), perms)
                return ok
            case ("pct", "exec", _, "--", *cmd):
                return self._guest(args, tuple(cmd))
        return ok

    def _guest(self, args: tuple[str, ...], cmd: tuple[str, ...]) -> CommandResult:
        if cmd[:1] == ("ping",):
            if self.probe_failures > 0:
                self.probe_failures -= 1
                return CommandResult(args, 1, stderr="ping: bad address\n")
            return CommandResult(args, 0)
        if cmd == ("cat", "/etc/os-release"):
            return CommandResult(args, 0, stdout=self.os_release)
        if cmd == ("ip", "-4", "addr", "show", "eth0"):
            return CommandResult(args, 0, stdout=ip_addr_output(self.dhcp_address))
        if cmd == ("ip", "route", "show", "default"):
            return CommandResult(args, 0, stdout="default via 192.168.1.1 dev eth0\n")
        return CommandResult(args, 0)


def _storage_table(names: list[str]) -> str:
    header = "Name  Type  Status  Total  Used  Available  %\n"
    rows = "".join(f"{n:<16} dir  active  98497780  12081844  81366388  12.27%\n" for n in names)
    return header + rows


@dataclasses.dataclass
class ScriptedOperator:
    """Operator that replays canned answers and records what it was shown."""

    answers: list[str] = dataclasses.field(default_factory=list)
    infos: list[str] = dataclasses.field(default_factory=list)
    warnings: list[str] = dataclasses.field(default_factory=list)
    choices: list[list[str]] = dataclasses.field(default_factory=list)
    questions: list[str] = dataclasses.field(default_factory=list)

    def info(self, msg: str) -> None:
        self.infos.append(msg)

    def warn(self, msg: str) -> None:
        self.warnings.append(msg)

    def ask(self, message: str, default: str = "") -> str:
        self.questions.append(message)
        answer = self.answers.pop(0) if self.answers else ""
        return answer or default

    def show_choices(self, items: Sequence[str]) -> None:
        self.choices.append(list(items))


class SleepRecorder:
    """Drop-in for ``time.sleep`` that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def host() -> FakeHost:
    return FakeHost(template_storages={"local": [ALPINE_TEMPLATE]})


@pytest.fixture
def pct(host: FakeHost) -> PctClient:
    return PctClient(host)


@pytest.fixture
def operator() -> ScriptedOperator:
    return ScriptedOperator()


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()

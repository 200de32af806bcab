"""End-to-end pipeline scenarios against a scripted host."""

from __future__ import annotations

import re

import pytest
from lxcsite._config import ProvisionConfig
from lxcsite.errors import ContainerCreateFailed, InvalidSelection, NetworkTimeout
from lxcsite.pct import PctClient
from lxcsite.pipeline import provision

from .conftest import ALPINE_TEMPLATE, FakeHost, ScriptedOperator, SleepRecorder

DOTTED_QUAD = re.compile(r"^\d{1,3}(\.\d{1,3}){3}$")


def _stage(call: tuple[str, ...]) -> str:
    """Collapse a recorded host call to a pipeline stage name."""
    match call:
        case ("pct", "status", *_):
            return "allocate"
        case ("pvesm", *_) | ("pveam", *_):
            return "resolve"
        case ("pct", "create", *_):
            return "create"
        case ("pct", "start", *_):
            return "start"
        case ("pct", "exec", _, "--", "ping", *_):
            return "poll"
        case ("pct", "exec", _, "--", "apk", *_):
            return "install"
        case ("pct", "exec", _, "--", "git", *_):
            return "clone"
        case ("pct", "exec", _, "--", "rc-update" | "rc-service", *_):
            return "service"
        case ("pct", "push", _, _, "/etc/nginx/http.d/default.conf", *_):
            return "config"
        case ("pct", "exec", _, "--", "ip", *_):
            return "report"
    return ""


def _stages(host: FakeHost) -> list[str]:
    stages: list[str] = []
    for call in host.calls:
        stage = _stage(call)
        if stage and (not stages or stages[-1] != stage):
            stages.append(stage)
    return stages


def test_dhcp_defaults_end_to_end() -> None:
    host = FakeHost(
        existing={100, 101},
        template_storages={"local": [ALPINE_TEMPLATE]},
        probe_failures=2,
        dhcp_address="192.168.1.77",
    )
    operator = ScriptedOperator(answers=[""])
    sleep = SleepRecorder()

    summary = provision(ProvisionConfig(), PctClient(host), operator, sleep=sleep)

    assert _stages(host) == [
        "allocate",
        "resolve",
        "create",
        "start",
        "poll",
        "install",
        "clone",
        "config",
        "service",
        "report",
    ]
    create = host.commands("pct", "create")[0]
    assert create[2:4] == ("102", ALPINE_TEMPLATE)
    assert "name=eth0,bridge=vmbr0,ip=dhcp" in create
    assert create[create.index("--memory") + 1] == "256"
    assert create[create.index("--cores") + 1] == "1"
    assert create[create.index("--rootfs") + 1] == "local-lvm:1"
    assert create[create.index("--start") + 1] == "0"
    assert create[create.index("--unprivileged") + 1] == "1"
    assert create[create.index("--features") + 1] == "nesting=1"
    assert create[create.index("--onboot") + 1] == "1"
    assert create[create.index("--hostname") + 1] == "thatguylaserworks"

    assert len(host.commands("pct", "exec", "102", "--", "ping")) == 3
    assert sleep.delays == [5.0, 2.0, 2.0]
    assert summary.ctid == 102
    assert summary.guest_family == "alpine"
    assert DOTTED_QUAD.match(summary.ip_address)


def test_static_end_to_end() -> None:
    host = FakeHost(template_storages={"local": [ALPINE_TEMPLATE]})
    config = ProvisionConfig(ctid=150, ip="192.168.1.50/24", gateway="192.168.1.1")

    summary = provision(config, PctClient(host), ScriptedOperator(), sleep=SleepRecorder())

    create = host.commands("pct", "create")[0]
    net0 = create[create.index("--net0") + 1]
    assert "ip=192.168.1.50/24" in net0
    assert "gw=192.168.1.1" in net0
    assert host.commands("pct", "status") == []
    assert summary.ip_address == "192.168.1.50"
    assert host.commands("pct", "exec", "150", "--", "ip", "-4") == []


def test_explicit_template_skips_resolver() -> None:
    host = FakeHost()
    provision(
        ProvisionConfig(ctid=120),
        PctClient(host),
        ScriptedOperator(),
        template="nas:vztmpl/alpine.tar.xz",
        sleep=SleepRecorder(),
    )
    assert host.commands("pvesm") == []
    assert host.commands("pct", "create")[0][3] == "nas:vztmpl/alpine.tar.xz"


def test_invalid_selection_creates_nothing() -> None:
    host = FakeHost(template_storages={"local": [ALPINE_TEMPLATE]})
    with pytest.raises(InvalidSelection):
        provision(ProvisionConfig(), PctClient(host), ScriptedOperator(answers=["9"]))
    assert host.commands("pct", "create") == []


def test_create_failure_is_fatal() -> None:
    host = FakeHost(fail={("pct", "create"): 255})
    with pytest.raises(ContainerCreateFailed):
        provision(
            ProvisionConfig(ctid=130),
            PctClient(host),
            ScriptedOperator(),
            template=ALPINE_TEMPLATE,
            sleep=SleepRecorder(),
        )
    assert host.commands("pct", "start") == []


def test_network_timeout_leaves_container() -> None:
    host = FakeHost(probe_failures=1_000)
    config = ProvisionConfig(ctid=140, network_attempts=4)
    with pytest.raises(NetworkTimeout):
        provision(
            config, PctClient(host), ScriptedOperator(), template=ALPINE_TEMPLATE, sleep=SleepRecorder()
        )
    assert 140 in host.existing
    assert len(host.commands("pct", "exec", "140", "--", "ping")) == 4


def test_unknown_address_is_not_fatal() -> None:
    host = FakeHost(fail={("pct", "exec", "160", "--", "ip"): 1})
    summary = provision(
        ProvisionConfig(ctid=160),
        PctClient(host),
        ScriptedOperator(),
        template=ALPINE_TEMPLATE,
        sleep=SleepRecorder(),
    )
    assert summary.ip_address == ""
    assert summary.url == "http://<ip-address>/"

# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Reachability probes run inside the guest while waiting for its network."""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from lxcsite.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Callable

    from lxcsite.pct import PctClient

_PROBE_TIMEOUT = 15


def repo_host(repo_url: str) -> str:
    """Return the host part of an https or scp-style git URL."""
    host = urlsplit(repo_url).hostname
    if host:
        return host
    # git@github.com:owner/repo.git
    _, _, rest = repo_url.partition("@")
    return rest.split(":", 1)[0]


def ping_probe(host: str) -> Callable[[PctClient, int], bool]:
    """Probe that succeeds when one ICMP echo to *host* gets a reply."""

    def probe(pct: PctClient, ctid: int) -> bool:
        return pct.exec(ctid, "ping", "-c", "1", host, timeout=_PROBE_TIMEOUT).ok

    probe.__name__ = f"ping:{host}"
    return probe


def route_probe(pct: PctClient, ctid: int) -> bool:
    """Probe that succeeds once the guest has a default route."""
    result = pct.exec(ctid, "ip", "route", "show", "default", timeout=_PROBE_TIMEOUT)
    return result.ok and bool(result.stdout.strip())


def make_probe(choice: str, repo_url: str) -> Callable[[PctClient, int], bool]:
    """Build a probe from its configured name.

    ``ping`` pings the repository host, ``ping:<host>`` pings *host*, and
    ``route`` waits for a default route.

    Raises:
        ConfigError: On an unknown probe name.

    """
    kind, _, target = choice.strip().partition(":")
    if kind == "route" and not target:
        return route_probe
    if kind == "ping":
        host = target or repo_host(repo_url)
        if host:
            return ping_probe(host)
    msg = f"unknown network probe {choice!r}: expected 'ping', 'ping:<host>' or 'route'"
    raise ConfigError(msg)

# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Network descriptor synthesis and guest address parsing."""

from __future__ import annotations

import ipaddress
import re

from lxcsite.errors import ConfigError

_INET_RE = re.compile(r"\binet\s+(\d{1,3}(?:\.\d{1,3}){3})")


def is_dhcp(ip: str) -> bool:
    """Return True when *ip* selects DHCP rather than a static address."""
    return ip.strip().lower() == "dhcp"


def validate_static_ip(ip: str) -> str:
    """Check that *ip* is an address in CIDR form and return it stripped.

    Raises:
        ConfigError: If *ip* is not a valid interface address.

    """
    ip = ip.strip()
    if "/" not in ip:
        msg = f"static address must be in CIDR form (e.g. 192.168.1.100/24), got {ip!r}"
        raise ConfigError(msg)
    try:
        ipaddress.ip_interface(ip)
    except ValueError as exc:
        msg = f"invalid static address: {ip!r}"
        raise ConfigError(msg) from exc
    return ip


def build_net_descriptor(bridge: str, ip: str, gateway: str = "") -> str:
    """Return the ``--net0`` value for ``pct create``.

    DHCP never carries a gateway clause.  A static address carries one only
    when *gateway* is non-empty.
    """
    parts = ["name=eth0", f"bridge={bridge}"]
    if is_dhcp(ip):
        parts.append("ip=dhcp")
    else:
        parts.append(f"ip={validate_static_ip(ip)}")
        if gateway.strip():
            parts.append(f"gw={gateway.strip()}")
    return ",".join(parts)


def static_address(ip: str) -> str:
    """Strip the prefix length from a CIDR address (``10.0.0.5/24`` -> ``10.0.0.5``)."""
    return ip.strip().split("/", 1)[0]


def parse_inet_address(output: str) -> str:
    """Return the first IPv4 address in ``ip -4 addr show`` output, or ``""``."""
    match = _INET_RE.search(output)
    return match.group(1) if match else ""

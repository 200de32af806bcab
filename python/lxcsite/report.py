# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Post-provisioning summary."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lxcsite.network import parse_inet_address, static_address
from lxcsite.types import ProvisionSummary

if TYPE_CHECKING:
    from lxcsite._config import ProvisionConfig
    from lxcsite.pct import PctClient


def guest_address(pct: PctClient, config: ProvisionConfig, ctid: int) -> str:
    """Return the guest's IPv4 address, or ``""`` when it cannot be determined.

    A static configuration is reported as configured.  Under DHCP the address
    is read from ``eth0`` inside the guest.
    """
    if not config.dhcp:
        return static_address(config.ip)
    result = pct.exec(ctid, "ip", "-4", "addr", "show", "eth0")
    return parse_inet_address(result.stdout) if result.ok else ""


def build_summary(
    pct: PctClient,
    config: ProvisionConfig,
    ctid: int,
    *,
    template: str = "",
    guest_family: str = "",
) -> ProvisionSummary:
    return ProvisionSummary(
        ctid=ctid,
        hostname=config.hostname,
        ip_address=guest_address(pct, config, ctid),
        template=template,
        guest_family=guest_family,
    )

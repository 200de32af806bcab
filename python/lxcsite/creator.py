# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Container creation via ``pct create``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lxcsite.errors import ContainerCreateFailed
from lxcsite.network import build_net_descriptor

if TYPE_CHECKING:
    from lxcsite._config import ProvisionConfig
    from lxcsite._prompt import Operator
    from lxcsite.pct import PctClient


def build_create_options(config: ProvisionConfig) -> list[str]:
    """Build the ``pct create`` option list from *config*.

    The container is unprivileged with nesting enabled, starts on host boot,
    and is not started by the create call itself.
    """
    return [
        "--hostname",
        config.hostname,
        "--memory",
        str(config.memory),
        "--cores",
        str(config.cores),
        "--rootfs",
        f"{config.storage}:{config.disk}",
        "--net0",
        build_net_descriptor(config.bridge, config.ip, config.gateway),
        "--unprivileged",
        "1",
        "--features",
        "nesting=1",
        "--onboot",
        "1",
        "--start",
        "0",
    ]


def create_container(
    pct: PctClient,
    config: ProvisionConfig,
    ctid: int,
    template: str,
    operator: Operator,
) -> None:
    """Create container *ctid* from *template*.

    Raises:
        ContainerCreateFailed: If ``pct create`` exits non-zero.

    """
    operator.info(f"Creating LXC container (CTID: {ctid})...")
    result = pct.create(ctid, template, build_create_options(config))
    if not result.ok:
        raise ContainerCreateFailed(
            f"Creating container {ctid}", result.argv, result.exit_code, result.stderr
        )
    operator.info("Container created successfully")

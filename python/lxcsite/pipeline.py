# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""The provisioning pipeline: allocate -> resolve -> create -> configure -> report."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from lxcsite.allocator import next_free_ctid
from lxcsite.creator import create_container
from lxcsite.guest import GuestConfigurator
from lxcsite.probes import make_probe
from lxcsite.report import build_summary
from lxcsite.templates import resolve_template

if TYPE_CHECKING:
    from collections.abc import Callable

    from lxcsite._config import ProvisionConfig
    from lxcsite._prompt import Operator
    from lxcsite.pct import PctClient
    from lxcsite.types import ProvisionSummary


def provision(
    config: ProvisionConfig,
    pct: PctClient,
    operator: Operator,
    *,
    template: str | None = None,
    probe: Callable[[PctClient, int], bool] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ProvisionSummary:
    """Provision one container from *config* and return its summary.

    Preflight checks and interactive setup are the caller's job.  A container
    left half-configured by a failing guest step stays in place.
    """
    ctid = config.ctid if config.ctid is not None else next_free_ctid(pct)
    if probe is None:
        probe = make_probe(config.probe, config.repo_url)

    if template is None:
        template = resolve_template(pct, operator, template_storage=config.template_storage)

    create_container(pct, config, ctid, template, operator)
    guest = GuestConfigurator(pct, config, ctid, operator, sleep=sleep).run(template, probe)
    return build_summary(pct, config, ctid, template=template, guest_family=guest.family)

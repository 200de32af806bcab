# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Provision a site container from a script, without prompts.

Builds the configuration in code, picks the first cached template, and
provisions a container with a static address.  Run as root on a Proxmox host.

Usage:
    python examples/provision_static.py 192.168.1.50/24 192.168.1.1
"""

import sys

import lxcsite
from lxcsite._runner import HostRunner
from lxcsite.preflight import run_preflight
from lxcsite.templates import list_local_templates


class PrintOperator:
    """Operator that prints progress and always takes the default answer."""

    def info(self, msg: str) -> None:
        print(f"[INFO] {msg}")

    def warn(self, msg: str) -> None:
        print(f"[WARN] {msg}")

    def ask(self, message: str, default: str = "") -> str:
        print(f"{message} [{default}]: {default}")
        return default

    def show_choices(self, items: list[str]) -> None:
        for i, item in enumerate(items, start=1):
            print(f"  {i}) {item}")


def main() -> None:
    ip, gateway = sys.argv[1], sys.argv[2]
    run_preflight()
    pct = lxcsite.PctClient(HostRunner())

    templates = list_local_templates(pct)
    if not templates:
        print("No cached templates; run 'pveam download' first.")
        raise SystemExit(1)

    config = lxcsite.load_config({"ip": ip, "gateway": gateway, "hostname": "site-static"})
    try:
        summary = lxcsite.provision(config, pct, PrintOperator(), template=templates[0])
    except lxcsite.LxcSiteError as exc:
        print(f"[ERROR] {exc}")
        raise SystemExit(1) from exc

    print()
    print(f"Container {summary.ctid} serving {summary.url}")
    print(f"Update with: {summary.update_command}")


if __name__ == "__main__":
    main()

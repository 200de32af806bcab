# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Guest configuration: boot, wait for network, install nginx and deploy the site."""

from __future__ import annotations

import os
import tempfile
import time
from typing import TYPE_CHECKING

from lxcsite.assets import UPDATE_SCRIPT_PATH, render_nginx_site, render_update_script
from lxcsite.errors import CommandFailed, NetworkTimeout, UnsupportedGuest
from lxcsite.guests import GuestProfile, detect_family, guess_family_from_template, resolve_guest

if TYPE_CHECKING:
    from collections.abc import Callable

    from lxcsite._config import ProvisionConfig
    from lxcsite._prompt import Operator
    from lxcsite.pct import PctClient
    from lxcsite.types import CommandResult

GUEST_PACKAGES = ("nginx", "git")


def wait_for_network(
    pct: PctClient,
    ctid: int,
    probe: Callable[[PctClient, int], bool],
    *,
    attempts: int,
    interval: float,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Poll *probe* until it succeeds, sleeping *interval* seconds between tries.

    Returns the number of probes made.  Raises :class:`NetworkTimeout` after
    *attempts* failed probes; no sleep follows the last one.
    """
    for attempt in range(1, attempts + 1):
        if probe(pct, ctid):
            return attempt
        if attempt < attempts:
            sleep(interval)
    raise NetworkTimeout(ctid, attempts)


class GuestConfigurator:
    """Runs the guest-side steps for one container, in order, with no rollback."""

    def __init__(
        self,
        pct: PctClient,
        config: ProvisionConfig,
        ctid: int,
        operator: Operator,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._pct = pct
        self._config = config
        self._ctid = ctid
        self._operator = operator
        self._sleep = sleep

    def run(self, template: str, probe: Callable[[PctClient, int], bool]) -> GuestProfile:
        """Configure the guest end to end and return the capability entry used."""
        self.start()
        self._operator.info("Waiting for network...")
        wait_for_network(
            self._pct,
            self._ctid,
            probe,
            attempts=self._config.network_attempts,
            interval=self._config.network_interval,
            sleep=self._sleep,
        )
        guest = self.detect_guest(template)
        self.install_packages(guest)
        self.deploy_site()
        self.configure_nginx(guest)
        self.install_update_script(guest)
        return guest

    def start(self) -> None:
        self._operator.info("Starting container...")
        self._check("Starting container", self._pct.start(self._ctid))
        # Let init bring up the network stack before the first probe.
        self._sleep(self._config.boot_delay)

    def detect_guest(self, template: str) -> GuestProfile:
        """Select the capability entry from ``/etc/os-release``, falling back to *template*."""
        result = self._pct.exec(self._ctid, "cat", "/etc/os-release")
        family = detect_family(result.stdout) if result.ok else ""
        if not family:
            family = guess_family_from_template(template)
        if not family:
            raise UnsupportedGuest(family)
        return resolve_guest(family)

    def install_packages(self, guest: GuestProfile) -> None:
        self._operator.info("Installing packages...")
        self._exec("Refreshing package index", *guest.refresh)
        self._exec("Installing packages", *guest.install_packages(*GUEST_PACKAGES))

    def deploy_site(self) -> None:
        web_root = self._config.web_root
        self._operator.info("Cloning website repository...")
        self._exec("Clearing web root", "rm", "-rf", web_root)
        self._exec(
            "Cloning repository",
            "git",
            "clone",
            "--branch",
            self._config.repo_branch,
            self._config.repo_url,
            web_root,
        )

    def configure_nginx(self, guest: GuestProfile) -> None:
        self._operator.info("Configuring nginx...")
        self._push_text(
            "Writing nginx config",
            render_nginx_site(self._config.web_root),
            guest.nginx_config_path,
            perms="0644",
        )
        self._operator.info("Enabling and starting nginx...")
        self._exec("Enabling nginx", *guest.enable_service)
        self._exec("Starting nginx", *guest.start_service)

    def install_update_script(self, guest: GuestProfile) -> None:
        self._operator.info("Creating update script...")
        script = render_update_script(
            self._config.web_root, self._config.repo_branch, guest.reload_command
        )
        self._push_text("Writing update script", script, UPDATE_SCRIPT_PATH, perms="0755")

    # --- helpers ---

    def _exec(self, step: str, *argv: str) -> CommandResult:
        return self._check(step, self._pct.exec(self._ctid, *argv))

    def _push_text(self, step: str, text: str, remote: str, *, perms: str) -> None:
        """Write *text* to a host temp file and push it to *remote* in the guest."""
        fd, local = tempfile.mkstemp(prefix="lxcsite-")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(text)
            self._check(step, self._pct.push(self._ctid, local, remote, perms=perms))
        finally:
            os.unlink(local)

    @staticmethod
    def _check(step: str, result: CommandResult) -> CommandResult:
        if not result.ok:
            raise CommandFailed(step, result.argv, result.exit_code, result.stderr)
        return result

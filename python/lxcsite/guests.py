# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Guest OS capability table and detection.

Maps an OS family (``"alpine"``, ``"debian"``) to the package manager,
service manager and nginx config path used inside the guest.  Selected once
per run by :func:`detect_family` and reused by every guest step.
"""

from __future__ import annotations

import dataclasses
import shlex


@dataclasses.dataclass(frozen=True)
class GuestProfile:
    """Commands and paths for one guest OS family."""

    family: str
    refresh: tuple[str, ...]
    install: tuple[str, ...]
    enable_service: tuple[str, ...]
    start_service: tuple[str, ...]
    reload_service: tuple[str, ...]
    nginx_config_path: str

    def install_packages(self, *packages: str) -> tuple[str, ...]:
        return (*self.install, *packages)

    @property
    def reload_command(self) -> str:
        """Shell form of the reload command, for the update script."""
        return shlex.join(self.reload_service)


GUESTS: dict[str, GuestProfile] = {
    "alpine": GuestProfile(
        family="alpine",
        refresh=("apk", "update"),
        install=("apk", "add", "--no-cache"),
        enable_service=("rc-update", "add", "nginx", "default"),
        start_service=("rc-service", "nginx", "start"),
        reload_service=("rc-service", "nginx", "reload"),
        nginx_config_path="/etc/nginx/http.d/default.conf",
    ),
    "debian": GuestProfile(
        family="debian",
        refresh=("apt-get", "update"),
        install=("env", "DEBIAN_FRONTEND=noninteractive", "apt-get", "install", "-y"),
        enable_service=("systemctl", "enable", "nginx"),
        start_service=("systemctl", "restart", "nginx"),
        reload_service=("systemctl", "reload", "nginx"),
        nginx_config_path="/etc/nginx/sites-available/default",
    ),
}

# Distribution ids that share a capability entry.
_ALIASES: dict[str, str] = {
    "ubuntu": "debian",
    "devuan": "debian",
}


def resolve_guest(family: str) -> GuestProfile:
    """Look up a capability entry by family name.

    Raises:
        ValueError: If *family* is not a known family.

    """
    try:
        return GUESTS[_ALIASES.get(family, family)]
    except KeyError:
        known = ", ".join(sorted(GUESTS))
        msg = f"Unknown guest family {family!r}. Known families: {known}"
        raise ValueError(msg) from None


def parse_os_release(text: str) -> dict[str, str]:
    """Parse ``/etc/os-release`` into a dict, unquoting values."""
    data: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        data[key.strip()] = value.strip().strip("\"'")
    return data


def detect_family(os_release: str) -> str:
    """Return the supported family named by ``ID`` or ``ID_LIKE``, or ``""``."""
    data = parse_os_release(os_release)
    candidates = [data.get("ID", ""), *data.get("ID_LIKE", "").split()]
    for candidate in candidates:
        family = _ALIASES.get(candidate, candidate)
        if family in GUESTS:
            return family
    return ""


def guess_family_from_template(template: str) -> str:
    """Guess the family from a template name like ``local:vztmpl/alpine-3.19-default_...``."""
    name = template.rsplit("/", 1)[-1].lower()
    for candidate in (*GUESTS, *_ALIASES):
        if name.startswith(candidate):
            return _ALIASES.get(candidate, candidate)
    return ""

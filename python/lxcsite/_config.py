# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Configuration loading with defaults -> install-level file -> overrides precedence."""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Any

import yaml

from lxcsite.errors import ConfigError
from lxcsite.network import is_dhcp, validate_static_ip

_CONFIG_FILENAME = "lxcsite.yaml"

DEFAULT_REPO_URL = "https://github.com/jhodgkin/thatlaserworksguy.git"


@dataclasses.dataclass(frozen=True)
class ProvisionConfig:
    """Resolved provisioning configuration, threaded through every pipeline stage."""

    ctid: int | None = None
    hostname: str = "thatguylaserworks"
    memory: int = 256
    disk: int = 1
    cores: int = 1
    storage: str = "local-lvm"
    template_storage: str = "local"
    bridge: str = "vmbr0"
    ip: str = "dhcp"
    gateway: str = ""
    repo_url: str = DEFAULT_REPO_URL
    repo_branch: str = "main"
    web_root: str = "/var/www/html"
    probe: str = "ping"
    network_attempts: int = 30
    network_interval: float = 2.0
    boot_delay: float = 5.0
    auto_log: bool = True

    def __post_init__(self) -> None:
        for name in ("memory", "disk", "cores", "network_attempts"):
            if getattr(self, name) < 1:
                msg = f"{name} must be a positive integer, got {getattr(self, name)!r}"
                raise ConfigError(msg)
        if self.ctid is not None and self.ctid < 100:  # noqa: PLR2004
            msg = f"container id must be 100 or greater, got {self.ctid}"
            raise ConfigError(msg)
        if not self.hostname:
            msg = "hostname must not be empty"
            raise ConfigError(msg)
        if not is_dhcp(self.ip):
            validate_static_ip(self.ip)

    @property
    def dhcp(self) -> bool:
        """Whether the guest takes its address from DHCP."""
        return is_dhcp(self.ip)

    def replace(self, **changes: Any) -> ProvisionConfig:
        """Return a copy with *changes* applied."""
        return _build_config({**dataclasses.asdict(self), **changes})


def load_config(overrides: dict[str, Any] | None = None) -> ProvisionConfig:
    """Load configuration with precedence: overrides > install file > defaults.

    1. Start with defaults
    2. Overlay install-level ``~/.lxcsite/lxcsite.yaml`` (if exists)
    3. Overlay *overrides* (CLI options and environment), skipping ``None`` values
    """
    merged: dict[str, Any] = {}

    install_config = Path.home() / ".lxcsite" / _CONFIG_FILENAME
    if install_config.is_file():
        _merge_yaml(merged, install_config)

    if overrides:
        merged.update({k: v for k, v in overrides.items() if v is not None})

    return _build_config(merged)


def _merge_yaml(target: dict[str, Any], path: Path) -> None:
    """Parse a YAML file and merge its values into *target*."""
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError:
        return
    if not isinstance(data, dict):
        return

    for key, value in data.items():
        if key == "network" and isinstance(value, dict):
            # Flatten network sub-keys into top-level config keys
            target.update(value)
        else:
            target[key] = value


_INT_FIELDS = frozenset({"ctid", "memory", "disk", "cores", "network_attempts"})
_FLOAT_FIELDS = frozenset({"network_interval", "boot_delay"})


def _coerce(name: str, value: Any) -> Any:
    """Convert YAML/env strings to the field's type."""
    if value is None:
        return None
    try:
        if name in _INT_FIELDS:
            return int(value)
        if name in _FLOAT_FIELDS:
            return float(value)
    except (TypeError, ValueError) as exc:
        msg = f"invalid value for {name}: {value!r}"
        raise ConfigError(msg) from exc
    if name == "auto_log":
        return value if isinstance(value, bool) else str(value).lower() in ("1", "true", "yes")
    return str(value)


def _build_config(overrides: dict[str, Any]) -> ProvisionConfig:
    """Build a ``ProvisionConfig`` from a dict of overrides."""
    field_names = {f.name for f in dataclasses.fields(ProvisionConfig)}
    filtered = {k: _coerce(k, v) for k, v in overrides.items() if k in field_names}
    return ProvisionConfig(**filtered)

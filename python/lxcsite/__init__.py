# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

from __future__ import annotations

from importlib.metadata import version

from lxcsite._config import ProvisionConfig, load_config
from lxcsite.errors import (
    CommandFailed,
    ConfigError,
    ContainerCreateFailed,
    ExecutionError,
    IdentifierExhausted,
    InvalidSelection,
    LxcSiteError,
    NetworkTimeout,
    NoTemplatesAvailable,
    NotRoot,
    PreconditionError,
    ProvisionCancelled,
    TemplateDownloadFailed,
    ToolMissing,
    UnsupportedGuest,
)
from lxcsite.pct import PctClient
from lxcsite.pipeline import provision
from lxcsite.types import CommandResult, ProvisionSummary

__version__ = version("lxcsite")


def get_version() -> str:
    """Return the lxcsite package version string."""
    return __version__


__all__ = [
    "CommandFailed",
    "CommandResult",
    "ConfigError",
    "ContainerCreateFailed",
    "ExecutionError",
    "IdentifierExhausted",
    "InvalidSelection",
    "LxcSiteError",
    "NetworkTimeout",
    "NoTemplatesAvailable",
    "NotRoot",
    "PctClient",
    "PreconditionError",
    "ProvisionCancelled",
    "ProvisionConfig",
    "ProvisionSummary",
    "TemplateDownloadFailed",
    "ToolMissing",
    "UnsupportedGuest",
    "__version__",
    "get_version",
    "load_config",
    "provision",
]

# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Host checks that run before anything is created."""

from __future__ import annotations

import os
import shutil

from lxcsite.errors import NotRoot, ToolMissing
from lxcsite.pct import HOST_TOOLS


def check_root() -> None:
    """Raise :class:`NotRoot` unless the effective uid is 0."""
    if os.geteuid() != 0:
        raise NotRoot


def check_tools(tools: tuple[str, ...] = HOST_TOOLS) -> None:
    """Raise :class:`ToolMissing` for the first of *tools* not on ``PATH``."""
    for tool in tools:
        if shutil.which(tool) is None:
            raise ToolMissing(tool)


def run_preflight() -> None:
    check_root()
    check_tools()

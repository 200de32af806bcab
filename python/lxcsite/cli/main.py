# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""CLI entry point for lxcsite."""

from __future__ import annotations

import dataclasses

import click

from lxcsite import __version__


@dataclasses.dataclass
class CliContext:
    """Shared state passed through Click's context object."""

    verbose: bool = False


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Echo every host command before it runs.")
@click.version_option(version=__version__, prog_name="lxcsite")
@click.pass_context
def cli(ctx: click.Context, *, verbose: bool) -> None:
    """Provision a Proxmox LXC container serving a static site with nginx."""
    ctx.ensure_object(dict)
    ctx.obj = CliContext(verbose=verbose)


# --- Register commands ---

from lxcsite.cli._commands import (  # noqa: E402
    install_cmd,
    templates_cmd,
    update_cmd,
)

cli.add_command(install_cmd)
cli.add_command(update_cmd)
cli.add_command(templates_cmd)

# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Rich output formatters and the console-backed operator for the CLI."""

from __future__ import annotations

import dataclasses
import json
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lxcsite._config import ProvisionConfig
    from lxcsite.errors import LxcSiteError
    from lxcsite.types import ProvisionSummary

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

_console = Console()
_err_console = Console(stderr=True)


class ConsoleOperator:
    """Operator that reports progress and asks questions on the terminal."""

    def __init__(self, console: Console | None = None, *, verbose: bool = False) -> None:
        self._console = console or _console
        self._verbose = verbose

    @property
    def console(self) -> Console:
        return self._console

    def info(self, msg: str) -> None:
        self._console.print(f"[green]\\[INFO][/green] {escape(msg)}")

    def warn(self, msg: str) -> None:
        self._console.print(f"[yellow]\\[WARN][/yellow] {escape(msg)}")

    def command(self, line: str) -> None:
        """Echo a host command before it runs (verbose mode only)."""
        if self._verbose:
            self._console.print(f"[dim]$ {escape(line)}[/dim]")

    def ask(self, message: str, default: str = "") -> str:
        suffix = f" \\[{escape(default)}]" if default else ""
        answer = self._console.input(f"{escape(message)}{suffix}: ").strip()
        return answer or default

    def show_choices(self, items: Sequence[str]) -> None:
        for i, item in enumerate(items, start=1):
            self._console.print(f"  {i}) {escape(item)}")


def make_operator(*, verbose: bool = False, json_output: bool = False) -> ConsoleOperator:
    """Return an operator; with *json_output* progress goes to stderr so stdout stays JSON."""
    return ConsoleOperator(_err_console if json_output else _console, verbose=verbose)


def print_banner(console: Console | None = None) -> None:
    """Print the interactive-setup header."""
    (console or _console).print(
        Panel(
            "[green]Proxmox LXC container setup[/green]\n"
            "Creates an LXC container running nginx to serve a static website.",
            title="[blue]lxcsite[/blue]",
            expand=False,
        )
    )


def format_config_summary(config: ProvisionConfig, console: Console | None = None) -> None:
    """Print the configuration the operator is about to confirm."""
    lines = [
        f"[bold]CTID:[/bold]     {config.ctid}",
        f"[bold]Hostname:[/bold] {escape(config.hostname)}",
        f"[bold]Memory:[/bold]   {config.memory}MB",
        f"[bold]Disk:[/bold]     {config.disk}GB",
        f"[bold]Cores:[/bold]    {config.cores}",
        f"[bold]Storage:[/bold]  {escape(config.storage)}",
        f"[bold]Network:[/bold]  {escape(config.ip)}",
    ]
    if not config.dhcp and config.gateway:
        lines.append(f"[bold]Gateway:[/bold]  {escape(config.gateway)}")
    panel = Panel("\n".join(lines), title="[yellow]Configuration Summary[/yellow]", expand=False)
    (console or _console).print(panel)


def format_summary(summary: ProvisionSummary, *, json_output: bool = False) -> None:
    """Print the post-install summary as a rich panel or JSON."""
    if json_output:
        data = dataclasses.asdict(summary)
        data["url"] = summary.url
        click_echo_json(data)
        return

    lines = [
        f"[bold]Container ID:[/bold]  [blue]{summary.ctid}[/blue]",
        f"[bold]Hostname:[/bold]      [blue]{escape(summary.hostname)}[/blue]",
        f"[bold]IP Address:[/bold]    [blue]{escape(summary.ip_address or 'unknown')}[/blue]",
        "",
        f"[bold]Website URL:[/bold]   [blue]{escape(summary.url)}[/blue]",
        "",
        "[yellow]To update the site:[/yellow]",
        f"  {summary.update_command}",
        "",
        "[yellow]To enter the container:[/yellow]",
        f"  {summary.enter_command}",
    ]
    _console.print(
        Panel("\n".join(lines), title="[green]Installation Complete![/green]", expand=False)
    )


def format_template_list(templates: list[str], *, json_output: bool = False) -> None:
    """Print cached templates as a rich table or JSON."""
    if json_output:
        click_echo_json(templates)
        return

    if not templates:
        _console.print("[dim]No templates found.[/dim]")
        return

    table = Table(title="Templates")
    table.add_column("#", style="dim")
    table.add_column("Storage", style="cyan")
    table.add_column("Volume")
    for i, volid in enumerate(templates, start=1):
        storage, _, volume = volid.partition(":")
        table.add_row(str(i), storage, volume)
    _console.print(table)


def format_storage_list(storages: list[str], console: Console | None = None) -> None:
    console = console or _console
    if storages:
        console.print("Available storage:")
        for name in storages:
            console.print(f"  - {escape(name)}")


def format_error(err: LxcSiteError, *, ctid: int | None = None) -> None:
    """Print an error as a rich panel with suggestions."""
    title, suggestion = _error_info(err)
    lines = [escape(str(err))]
    if ctid is not None:
        lines.append(
            f"\nContainer {ctid} was left in place for inspection: pct enter {ctid}"
        )
    if suggestion:
        lines.append(f"\n[dim]{escape(suggestion)}[/dim]")

    panel = Panel(
        "\n".join(lines),
        title=f"[red]{title}[/red]",
        expand=False,
    )
    _err_console.print(panel)


def _error_info(err: LxcSiteError) -> tuple[str, str]:
    """Map an error to a title and suggestion string."""
    from lxcsite.errors import (  # noqa: PLC0415
        ContainerCreateFailed,
        IdentifierExhausted,
        InvalidSelection,
        NetworkTimeout,
        NoTemplatesAvailable,
        NotRoot,
        TemplateDownloadFailed,
        ToolMissing,
    )

    if isinstance(err, NotRoot):
        return "Permission Denied", "Re-run as root: sudo lxcsite install"
    if isinstance(err, ToolMissing):
        return "Not a Proxmox Host", "Run lxcsite on a Proxmox VE node."
    if isinstance(err, InvalidSelection):
        return "Invalid Selection", "Enter one of the listed numbers."
    if isinstance(err, NoTemplatesAvailable):
        return "No Templates", "Check 'pveam update' and the host's internet access."
    if isinstance(err, TemplateDownloadFailed):
        return "Download Failed", "Check the template storage and try 'pveam download' manually."
    if isinstance(err, ContainerCreateFailed):
        return "Create Failed", "Check that the storage and bridge exist: pvesm status"
    if isinstance(err, NetworkTimeout):
        return "Network Timeout", "Check the bridge, DHCP server or static gateway."
    if isinstance(err, IdentifierExhausted):
        return "No Free Container ID", "Pass an explicit --ctid."
    return "Error", ""


def print_success(msg: str) -> None:
    """Print a success message with a checkmark."""
    _console.print(f"[green]\u2713[/green] {msg}")


def confirm_proceed(msg: str, console: Console | None = None) -> bool:
    """Prompt for confirmation, defaulting to yes.  Returns False only on 'n'."""
    answer = (console or _console).input(f"[yellow]{msg} \\[Y/n]:[/yellow] ")
    return answer.strip().lower() not in ("n", "no")


def click_echo_json(data: object) -> None:
    """Serialize data to JSON and echo to stdout."""
    sys.stdout.write(json.dumps(data, indent=2, default=str) + "\n")

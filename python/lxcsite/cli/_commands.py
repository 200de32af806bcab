# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""CLI command implementations."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import click

from lxcsite._config import load_config
from lxcsite._logger import RunLogger
from lxcsite._prompt import parse_selection
from lxcsite._runner import HostRunner
from lxcsite.allocator import next_free_ctid
from lxcsite.cli._output import (
    ConsoleOperator,
    confirm_proceed,
    format_config_summary,
    format_error,
    format_storage_list,
    format_summary,
    format_template_list,
    make_operator,
    print_banner,
    print_success,
)
from lxcsite.errors import (
    CommandFailed,
    ConfigError,
    ContainerCreateFailed,
    LxcSiteError,
    ProvisionCancelled,
)
from lxcsite.network import validate_static_ip
from lxcsite.pct import PctClient
from lxcsite.pipeline import provision
from lxcsite.preflight import run_preflight
from lxcsite.templates import list_local_templates

if TYPE_CHECKING:
    from lxcsite._config import ProvisionConfig
    from lxcsite.cli.main import CliContext


def _get_ctx(ctx: click.Context) -> CliContext:
    """Extract the CliContext from Click's context object."""
    return ctx.obj  # type: ignore[no-any-return]


def _fail(exc: LxcSiteError, *, ctid: int | None = None) -> SystemExit:
    format_error(exc, ctid=ctid)
    return SystemExit(1)


def _connect(operator: ConsoleOperator, logger: RunLogger | None = None) -> PctClient:
    """Run preflight checks and return a client for the host's container manager."""
    try:
        run_preflight()
    except LxcSiteError as exc:
        raise _fail(exc) from exc
    return PctClient(HostRunner(logger, echo=operator.command))


# ---------------------------------------------------------------------------
# Interactive setup
# ---------------------------------------------------------------------------


def interactive_setup(
    config: ProvisionConfig,
    pct: PctClient,
    operator: ConsoleOperator,
) -> ProvisionConfig:
    """Prompt for ctid, hostname, network and storage; return the updated config."""
    console = operator.console
    print_banner(console)

    default_ctid = str(next_free_ctid(pct))
    answer = operator.ask("Container ID", default=default_ctid)
    try:
        ctid = int(answer)
    except ValueError:
        msg = f"container id must be a number, got {answer!r}"
        raise ConfigError(msg) from None

    hostname = operator.ask("Hostname", default=config.hostname)

    console.print("\nNetwork Configuration:")
    operator.show_choices(["DHCP (automatic)", "Static IP"])
    option = parse_selection(operator.ask("Select option", default="1"), 2, default=1)
    ip, gateway = "dhcp", ""
    if option == 1:
        ip = validate_static_ip(operator.ask("Static IP (CIDR format, e.g., 192.168.1.100/24)"))
        gateway = operator.ask("Gateway")

    console.print()
    format_storage_list(pct.storages(), console)
    storage = operator.ask("Storage", default=config.storage)

    return config.replace(ctid=ctid, hostname=hostname, ip=ip, gateway=gateway, storage=storage)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.command("install")
@click.option("--ctid", type=int, envvar="LXCSITE_CTID", default=None, help="Container ID.")
@click.option("--hostname", envvar="LXCSITE_HOSTNAME", default=None, help="Guest hostname.")
@click.option("--memory", type=int, envvar="LXCSITE_MEMORY", default=None, help="Memory in MB.")
@click.option("--disk", type=int, envvar="LXCSITE_DISK", default=None, help="Disk size in GB.")
@click.option("--cores", type=int, envvar="LXCSITE_CORES", default=None, help="CPU cores.")
@click.option("--storage", envvar="LXCSITE_STORAGE", default=None, help="Root disk storage.")
@click.option(
    "--template-storage",
    envvar="LXCSITE_TEMPLATE_STORAGE",
    default=None,
    help="Storage that downloaded templates go to.",
)
@click.option("--bridge", envvar="LXCSITE_BRIDGE", default=None, help="Network bridge.")
@click.option("--ip", envvar="LXCSITE_IP", default=None, help="'dhcp' or a CIDR address.")
@click.option("--gateway", envvar="LXCSITE_GATEWAY", default=None, help="Gateway (static only).")
@click.option("--repo-url", envvar="LXCSITE_REPO_URL", default=None, help="Site git repository.")
@click.option("--repo-branch", envvar="LXCSITE_REPO_BRANCH", default=None, help="Site branch.")
@click.option(
    "--probe",
    envvar="LXCSITE_PROBE",
    default=None,
    help="Network readiness check: 'ping', 'ping:<host>' or 'route'.",
)
@click.option("--template", default=None, help="Template reference; skips template selection.")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt.")
@click.option("--json", "json_output", is_flag=True, help="Print the summary as JSON.")
@click.option("--no-log", is_flag=True, help="Do not write command history to disk.")
@click.pass_context
def install_cmd(  # noqa: PLR0913
    ctx: click.Context,
    *,
    template: str | None,
    yes: bool,
    json_output: bool,
    no_log: bool,
    **options: Any,
) -> None:
    """Create a container, install nginx and deploy the site."""
    cli_ctx = _get_ctx(ctx)
    operator = make_operator(verbose=cli_ctx.verbose, json_output=json_output)

    try:
        config = load_config(options)
    except LxcSiteError as exc:
        raise _fail(exc) from exc

    logger = RunLogger(enabled=config.auto_log and not no_log)
    pct = _connect(operator, logger)
    logger.start_run(datetime.now(tz=timezone.utc))
    try:
        _install(config, pct, operator, template=template, yes=yes, json_output=json_output)
    finally:
        logger.close()


def _leftover(
    pct: PctClient, config: ProvisionConfig, exc: LxcSiteError, *, existed: bool
) -> int | None:
    """Return the ctid this run created and left behind, if any."""
    if existed or config.ctid is None or isinstance(exc, ContainerCreateFailed):
        return None
    return config.ctid if pct.exists(config.ctid) else None


def _install(
    config: ProvisionConfig,
    pct: PctClient,
    operator: ConsoleOperator,
    *,
    template: str | None,
    yes: bool,
    json_output: bool,
) -> None:
    existed = False
    try:
        if config.ctid is None:
            config = interactive_setup(config, pct, operator)
            format_config_summary(config, operator.console)
            if not yes and not confirm_proceed("Proceed with installation?", operator.console):
                click.echo("Installation cancelled.", err=json_output)
                return
        existed = config.ctid is not None and pct.exists(config.ctid)
        summary = provision(config, pct, operator, template=template)
    except ProvisionCancelled as exc:
        click.echo(str(exc) or "Installation cancelled.", err=json_output)
        return
    except LxcSiteError as exc:
        raise _fail(exc, ctid=_leftover(pct, config, exc, existed=existed)) from exc

    format_summary(summary, json_output=json_output)


@click.command("update")
@click.argument("ctid", type=int)
@click.pass_context
def update_cmd(ctx: click.Context, ctid: int) -> None:
    """Re-pull the site repository inside a container and reload nginx."""
    cli_ctx = _get_ctx(ctx)
    operator = ConsoleOperator(verbose=cli_ctx.verbose)
    pct = _connect(operator)

    result = pct.exec(ctid, "update-site")
    if result.stdout:
        click.echo(result.stdout.rstrip("\n"))
    if not result.ok:
        err = CommandFailed(
            f"Updating site in container {ctid}", result.argv, result.exit_code, result.stderr
        )
        raise _fail(err) from err
    print_success(f"Container {ctid} updated")


@click.command("templates")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def templates_cmd(ctx: click.Context, *, json_output: bool) -> None:
    """List container templates cached on this host."""
    cli_ctx = _get_ctx(ctx)
    pct = _connect(make_operator(verbose=cli_ctx.verbose, json_output=json_output))
    format_template_list(list_local_templates(pct), json_output=json_output)

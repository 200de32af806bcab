# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Template resolution across local storages with a remote-catalog fallback."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lxcsite._prompt import parse_selection
from lxcsite.errors import NoTemplatesAvailable, ProvisionCancelled, TemplateDownloadFailed

if TYPE_CHECKING:
    from lxcsite._prompt import Operator
    from lxcsite.pct import PctClient

CATALOG_LIMIT = 20


def list_local_templates(pct: PctClient) -> list[str]:
    """Return cached templates from every template-capable storage, in storage order."""
    templates: list[str] = []
    for storage in pct.template_storages():
        templates.extend(pct.list_templates(storage))
    return templates


def resolve_template(
    pct: PctClient,
    operator: Operator,
    *,
    template_storage: str,
    catalog_limit: int = CATALOG_LIMIT,
) -> str:
    """Return a template reference ``pct create`` will accept.

    Cached templates are offered first (default: the first one).  With none
    cached, the remote catalog is refreshed and up to *catalog_limit* entries
    are offered; the chosen one is downloaded into *template_storage*.

    Raises:
        InvalidSelection: On a non-numeric or out-of-range answer.
        NoTemplatesAvailable: If nothing is cached and the catalog is empty.
        ProvisionCancelled: If the operator quits at the download prompt.
        TemplateDownloadFailed: If ``pveam download`` fails.

    """
    operator.info("Scanning for available templates...")
    local = list_local_templates(pct)
    if local:
        operator.show_choices(local)
        answer = operator.ask("Select template", default="1")
        return local[parse_selection(answer, len(local), default=1)]

    operator.warn("No templates found locally.")
    # A stale index only narrows the choices; carry on with what is there.
    pct.update_catalog()
    available = pct.available_templates()[:catalog_limit]
    if not available:
        raise NoTemplatesAvailable

    operator.show_choices(available)
    answer = operator.ask("Enter number to download (or 'q' to quit)")
    if answer.strip().lower() == "q":
        raise ProvisionCancelled("Template download cancelled.")
    selected = available[parse_selection(answer, len(available))]

    operator.info(f"Downloading {selected}...")
    result = pct.download(template_storage, selected)
    if not result.ok:
        raise TemplateDownloadFailed(
            f"Download of {selected}", result.argv, result.exit_code, result.stderr
        )
    return f"{template_storage}:vztmpl/{selected}"

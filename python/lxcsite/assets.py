# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Files written into the guest, rendered from templates bundled with the package.

Templates live in ``lxcsite/_assets/`` and use ``@name`` placeholders so that
nginx ``$variables`` pass through untouched.
"""

from __future__ import annotations

import pathlib
import shlex
import string

NGINX_SITE = "nginx-site.conf"
UPDATE_SCRIPT = "update-site.sh"

UPDATE_SCRIPT_PATH = "/usr/local/bin/update-site"


class _AssetTemplate(string.Template):
    delimiter = "@"


def get_asset_path(name: str) -> pathlib.Path:
    """Return the absolute path to a bundled asset template."""
    # _assets/ lives next to this file inside the installed package.
    package_dir = pathlib.Path(__file__).resolve().parent
    return package_dir / "_assets" / name


def render_asset(name: str, **values: str) -> str:
    """Render asset *name* with *values*.

    Raises:
        KeyError: If the template references a placeholder missing from *values*.

    """
    template = _AssetTemplate(get_asset_path(name).read_text())
    return template.substitute(values)


def render_nginx_site(web_root: str) -> str:
    return render_asset(NGINX_SITE, web_root=web_root)


def render_update_script(web_root: str, branch: str, reload_command: str) -> str:
    return render_asset(
        UPDATE_SCRIPT,
        web_root=shlex.quote(web_root),
        branch=shlex.quote(branch),
        reload_command=reload_command,
    )

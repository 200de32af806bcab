# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Container id allocation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lxcsite.errors import IdentifierExhausted

if TYPE_CHECKING:
    from lxcsite.pct import PctClient

BASE_CTID = 100
SEARCH_WINDOW = 1000


def next_free_ctid(pct: PctClient, *, base: int = BASE_CTID, window: int = SEARCH_WINDOW) -> int:
    """Return the first id >= *base* that ``pct status`` does not know.

    Raises:
        IdentifierExhausted: If all *window* ids starting at *base* are taken.

    """
    for ctid in range(base, base + window):
        if not pct.exists(ctid):
            return ctid
    raise IdentifierExhausted(base, window)

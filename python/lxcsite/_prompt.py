# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) deftio llc

"""Operator interaction surface used by the pipeline stages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from lxcsite.errors import InvalidSelection

if TYPE_CHECKING:
    from collections.abc import Sequence


class Operator(Protocol):
    """Where progress goes and where answers come from."""

    def info(self, msg: str) -> None: ...

    def warn(self, msg: str) -> None: ...

    def ask(self, message: str, default: str = "") -> str: ...

    def show_choices(self, items: Sequence[str]) -> None: ...


def parse_selection(choice: str, count: int, *, default: int | None = None) -> int:
    """Convert a 1-based menu answer into a 0-based index.

    An empty answer selects *default* when one is given.  Anything that is not
    an integer in ``[1, count]`` raises :class:`InvalidSelection`; there is no
    re-prompt.
    """
    choice = choice.strip()
    if not choice and default is not None:
        choice = str(default)
    try:
        number = int(choice)
    except ValueError:
        raise InvalidSelection(choice, count) from None
    if not 1 <= number <= count:
        raise InvalidSelection(choice, count)
    return number - 1

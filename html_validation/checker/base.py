"""Markup checker contract."""

from __future__ import annotations

from typing import Protocol, Sequence

PROPRIETARY_MARKER = "proprietary attribute"


class MarkupChecker(Protocol):
    def check(self, html: str, flags: Sequence[str], ignore_proprietary: bool = False) -> list[str]:
        """Return the diagnostic lines for ``html``.

        Must raise ``CheckerUnavailable`` when the checker cannot run, rather
        than returning an empty or synthetic diagnostic list.

        Each line must be non-blank and free of line breaks so it can be
        stored one per line.
        """
        ...


def drop_proprietary(lines: Sequence[str]) -> list[str]:
    """Remove messages like ``<textarea> proprietary attribute "wrap"``."""
    return [line for line in lines if PROPRIETARY_MARKER not in line]

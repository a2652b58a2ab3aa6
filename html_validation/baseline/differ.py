"""Diagnostic differ — compares a fresh checker run against the accepted baseline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagnosticDiff:
    new_lines: tuple[str, ...] = field(default_factory=tuple)
    stale_lines: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        # Stale lines never fail a validation
        return not self.new_lines


def _unique(lines: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out = []
    for line in lines:
        if line not in seen:
            seen.add(line)
            out.append(line)
    return out


def diff_diagnostics(baseline: Iterable[str], fresh: Iterable[str]) -> DiagnosticDiff:
    """Split diagnostics into lines not yet accepted and accepted lines that vanished.

    Lines are compared by exact string equality; order follows ``fresh`` for
    new lines and ``baseline`` for stale ones.
    """
    baseline_lines = _unique(baseline)
    fresh_lines = _unique(fresh)
    accepted = set(baseline_lines)
    current = set(fresh_lines)

    new_lines = tuple(line for line in fresh_lines if line not in accepted)
    stale_lines = tuple(line for line in baseline_lines if line not in current)
    if stale_lines:
        logger.debug("%d accepted diagnostics no longer occur", len(stale_lines))
    return DiagnosticDiff(new_lines=new_lines, stale_lines=stale_lines)


def merge_baseline(baseline: Iterable[str], new_lines: Iterable[str]) -> list[str]:
    """Union of the baseline and newly accepted lines, baseline order first."""
    return _unique([*baseline, *new_lines])

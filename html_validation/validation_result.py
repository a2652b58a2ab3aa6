"""Validation result — one checker run for one resource, diffed against its baseline."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from html_validation.baseline.differ import DiagnosticDiff, diff_diagnostics, merge_baseline
from html_validation.baseline.exception_store import ExceptionStore
from html_validation.checker.base import MarkupChecker
from html_validation.errors import InvalidStateError
from html_validation.models.config import ValidationOptions

logger = logging.getLogger(__name__)


class ResultState(str, Enum):
    UNCHECKED = "unchecked"
    CHECKED = "checked"
    ACCEPTED = "accepted"


class ValidationStatus(str, Enum):
    CLEAN = "clean"
    HAS_NEW_DIAGNOSTICS = "has_new_diagnostics"


class ValidationResult:
    """The outcome of validating one resource.

    Creating a result runs the checker straight away, diffs its output against
    the accepted baseline and records the new lines as pending, so every run
    can be found again by a later review. Only ``accept()`` changes the
    baseline.
    """

    def __init__(
        self,
        identity: str,
        html: Optional[str],
        store: ExceptionStore,
        checker: Optional[MarkupChecker] = None,
        options: Optional[ValidationOptions] = None,
        resource_name: Optional[str] = None,
    ):
        self.identity = identity
        self.resource_name = resource_name or identity
        self.html = html
        self.options = options or ValidationOptions()
        self._store = store
        self._checker = checker
        self.state = ResultState.UNCHECKED
        self.raw_output: tuple[str, ...] = ()
        self.baseline: tuple[str, ...] = ()
        self._diff = DiagnosticDiff()

        if checker is not None:
            self._run_check()

    @classmethod
    def from_store(cls, identity: str, store: ExceptionStore) -> "ValidationResult":
        """Rebuild the result of a previous run from its pending file.

        The checker is not run and nothing is written; the result is ready to
        be reviewed and accepted.
        """
        result = cls(identity, None, store)
        result._load(store.load_baseline(identity), store.load_pending(identity))
        # The pending file only holds new lines, so staleness is unknown here
        result._diff = DiagnosticDiff(new_lines=result._diff.new_lines)
        return result

    def _run_check(self) -> None:
        fresh = self._checker.check(
            self.html or "",
            self.options.tidy_flags,
            ignore_proprietary=self.options.ignore_proprietary,
        )
        self._load(self._store.load_baseline(self.identity), fresh)
        self._store.save_pending(self.identity, self._diff.new_lines)
        if self._diff.new_lines:
            logger.debug("%s has %d new diagnostics", self.resource_name, len(self._diff.new_lines))

    def _load(self, baseline: list[str], fresh: list[str]) -> None:
        self.baseline = tuple(baseline)
        self.raw_output = tuple(fresh)
        self._diff = diff_diagnostics(baseline, fresh)
        self.state = ResultState.CHECKED

    @property
    def diagnostics(self) -> tuple[str, ...]:
        """Diagnostics not present in the accepted baseline."""
        return self._diff.new_lines

    @property
    def stale_diagnostics(self) -> tuple[str, ...]:
        """Accepted diagnostics that this run no longer produced."""
        return self._diff.stale_lines

    @property
    def status(self) -> ValidationStatus:
        if self._diff.is_clean:
            return ValidationStatus.CLEAN
        return ValidationStatus.HAS_NEW_DIAGNOSTICS

    def is_valid(self) -> bool:
        return self.state is not ResultState.UNCHECKED and self._diff.is_clean

    def accept(self) -> None:
        """Merge the new diagnostics into the accepted baseline.

        Accepting twice, or accepting a clean result, changes nothing. If the
        pending file still holds lines the baseline already has, it is cleared.
        """
        if self.state is ResultState.UNCHECKED:
            raise InvalidStateError(f"Cannot accept {self.resource_name}: validation has not run")
        if self.state is ResultState.ACCEPTED:
            return
        if not self._diff.new_lines:
            # Pending lines already in the baseline: an earlier accept stopped
            # before clearing the pending file
            if self._store.load_pending(self.identity):
                self._store.promote(self.identity, self.baseline)
            else:
                logger.debug("Nothing to accept for %s", self.resource_name)
            self.state = ResultState.ACCEPTED
            return

        promoted = merge_baseline(self.baseline, self._diff.new_lines)
        self._store.promote(self.identity, promoted)
        self.baseline = tuple(promoted)
        self._diff = DiagnosticDiff(stale_lines=self._diff.stale_lines)
        self.state = ResultState.ACCEPTED

    def failure_message(self) -> str:
        if self.is_valid():
            return f"{self.resource_name}: HTML is valid"
        lines = [f"{self.resource_name}: {len(self.diagnostics)} new HTML validation diagnostics"]
        lines.extend(f"  {line}" for line in self.diagnostics)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"ValidationResult(identity={self.identity!r}, state={self.state.value}, "
            f"new={len(self.diagnostics)}, stale={len(self.stale_diagnostics)})"
        )

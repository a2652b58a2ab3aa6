"""Validation session — owns the data folder and options shared by many validations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Union

from html_validation.baseline.exception_store import ExceptionStore, FileExceptionStore
from html_validation.checker.base import MarkupChecker
from html_validation.checker.tidy import TidyChecker
from html_validation.identity import resource_identity
from html_validation.models.config import ValidationConfig, ValidationOptions
from html_validation.paths import default_data_folder, ensure_data_folder
from html_validation.validation_result import ValidationResult

logger = logging.getLogger(__name__)


class HTMLValidation:
    """Entry point for validating HTML and reviewing stored exceptions.

    ``data_folder`` is where result files are kept; pointing it at a folder in
    your project stores accepted exceptions alongside the source. ``options``
    is a ``ValidationOptions`` or a mapping with the same keys, and is captured
    once here so later changes to the defaults do not affect this session.
    """

    def __init__(
        self,
        data_folder: Optional[Union[str, Path]] = None,
        options: Optional[Union[ValidationOptions, Mapping[str, Any]]] = None,
        checker: Optional[MarkupChecker] = None,
        store: Optional[ExceptionStore] = None,
    ):
        self.data_folder = ensure_data_folder(data_folder or default_data_folder())
        if options is None:
            options = ValidationOptions()
        elif not isinstance(options, ValidationOptions):
            options = ValidationOptions(**options)
        self.options = options
        self.checker = checker or TidyChecker()
        self.store = store or FileExceptionStore(self.data_folder)
        self._seen_identities: dict[str, str] = {}

    @classmethod
    def from_config(cls, config: ValidationConfig, checker: Optional[MarkupChecker] = None) -> "HTMLValidation":
        checker = checker or TidyChecker(config.tidy_command, timeout=config.tidy_timeout_seconds)
        return cls(config.data_folder, config.options, checker=checker)

    def validation(self, html: str, resource_name: str) -> ValidationResult:
        """Validate ``html``; ``resource_name`` (usually a URL) only names the result files."""
        identity = resource_identity(resource_name)
        self._note_identity(identity, resource_name)
        return ValidationResult(
            identity,
            html,
            self.store,
            checker=self.checker,
            options=self.options,
            resource_name=resource_name,
        )

    def each_exception(self) -> Iterator[ValidationResult]:
        """Yield a reviewable result for every resource with pending diagnostics.

        Results come from the files of earlier runs; the checker is not run
        again. Call ``accept()`` on the ones that are acceptable.
        """
        for identity in self.store.enumerate_pending_identities():
            # Yielded even when every pending line is already accepted, so
            # accept() can finish clearing it
            yield ValidationResult.from_store(identity, self.store)

    def _note_identity(self, identity: str, resource_name: str) -> None:
        previous = self._seen_identities.setdefault(identity, resource_name)
        if previous != resource_name:
            logger.warning(
                "Resources %r and %r share result files %r; their exceptions are merged",
                previous, resource_name, identity,
            )

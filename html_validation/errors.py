"""Exception hierarchy for HTML validation."""

from __future__ import annotations


class HTMLValidationError(Exception):
    """Base class for every error raised by this package."""


class CheckerUnavailable(HTMLValidationError):
    """The external markup checker could not be run at all.

    Raised instead of returning diagnostics so a broken validator is never
    mistaken for HTML with new warnings.
    """


class StoreIOError(HTMLValidationError, OSError):
    """Reading or writing an exception file failed.

    Constructed like ``OSError(errno, strerror, filename)``.
    """


class InvalidStateError(HTMLValidationError):
    """An operation was attempted in a lifecycle state that does not allow it."""


class InvalidDiagnosticError(HTMLValidationError, ValueError):
    """A diagnostic line cannot be stored one-per-line in an exception file."""

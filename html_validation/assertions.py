"""Assertion helper for test suites."""

from __future__ import annotations

from typing import Optional

from html_validation.session import HTMLValidation
from html_validation.validation_result import ValidationResult

_default_session: Optional[HTMLValidation] = None


def _get_default_session() -> HTMLValidation:
    global _default_session
    if _default_session is None:
        _default_session = HTMLValidation()
    return _default_session


def assert_valid_html(
    html: str, resource_name: str, session: Optional[HTMLValidation] = None
) -> ValidationResult:
    """Fail with the list of new diagnostics unless ``html`` validates cleanly.

    Failures stay pending in the data folder; run ``html-validation review``
    to accept the ones that are fine.
    """
    result = (session or _get_default_session()).validation(html, resource_name)
    if not result.is_valid():
        raise AssertionError(result.failure_message())
    return result

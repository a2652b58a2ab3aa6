"""Pytest configuration and shared fixtures."""

import errno
from pathlib import Path
from typing import Sequence

import pytest

from html_validation.baseline.exception_store import FileExceptionStore
from html_validation.errors import StoreIOError
from html_validation.models.config import ValidationOptions
from html_validation.session import HTMLValidation


class FakeChecker:
    """Stands in for tidy: returns canned diagnostics per HTML string."""

    def __init__(self, outputs: dict[str, list[str]] | None = None, default: list[str] | None = None):
        self.outputs = outputs or {}
        self.default = default or []
        self.calls: list[tuple[str, tuple[str, ...], bool]] = []

    def check(self, html: str, flags: Sequence[str], ignore_proprietary: bool = False) -> list[str]:
        self.calls.append((html, tuple(flags), ignore_proprietary))
        return list(self.outputs.get(html, self.default))


class InterruptedPromoteStore(FileExceptionStore):
    """Writes the baseline, then fails once before the pending file is cleared."""

    def __init__(self, data_folder: Path):
        super().__init__(data_folder)
        self.interrupt_next_promote = True

    def promote(self, identity: str, lines) -> None:
        if self.interrupt_next_promote:
            self.interrupt_next_promote = False
            self._write_lines(self.baseline_path(identity), list(lines))
            raise StoreIOError(errno.EIO, "Could not write exception file", str(self.pending_path(identity)))
        super().promote(identity, lines)


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def data_folder(tmp_path: Path) -> Path:
    """Create an empty validation data folder."""
    folder = tmp_path / ".validation"
    folder.mkdir()
    return folder


@pytest.fixture
def store(data_folder: Path) -> FileExceptionStore:
    """Create a file-backed exception store."""
    return FileExceptionStore(data_folder)


# ============================================================================
# Checker and Session Fixtures
# ============================================================================


@pytest.fixture
def checker() -> FakeChecker:
    """Create a checker that reports W1 for '<bad>' and nothing otherwise."""
    return FakeChecker(
        outputs={
            "<bad>": ["line 1 column 1 - Warning: W1"],
            "<worse>": ["line 1 column 1 - Warning: W1", "line 2 column 1 - Error: E1"],
        }
    )


@pytest.fixture
def session(data_folder: Path, checker: FakeChecker) -> HTMLValidation:
    """Create a validation session backed by the fake checker."""
    return HTMLValidation(data_folder, ValidationOptions(), checker=checker)

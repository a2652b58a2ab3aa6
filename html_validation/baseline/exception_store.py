"""Exception store — persists accepted and pending diagnostics per resource identity."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Protocol

from html_validation.errors import InvalidDiagnosticError, StoreIOError
from html_validation.utils.fs_atomic import atomic_write_text

logger = logging.getLogger(__name__)

BASELINE_SUFFIX = ".exceptions.txt"
PENDING_SUFFIX = ".newexceptions.txt"


class ExceptionStore(Protocol):
    """Storage contract used by validation results and sessions."""

    def has_baseline(self, identity: str) -> bool: ...

    def load_baseline(self, identity: str) -> list[str]: ...

    def load_pending(self, identity: str) -> list[str]: ...

    def save_pending(self, identity: str, lines: Iterable[str]) -> None: ...

    def promote(self, identity: str, lines: Iterable[str]) -> None: ...

    def enumerate_pending_identities(self) -> Iterator[str]: ...


class FileExceptionStore:
    """Keeps one pair of newline-joined text files per identity in a directory.

    ``<identity>.exceptions.txt`` holds the accepted baseline and
    ``<identity>.newexceptions.txt`` the diagnostics of the latest run that
    were not yet accepted. An empty file is a valid state.

    Lines are stored verbatim, so each must be non-blank and contain no line
    break; anything else raises ``InvalidDiagnosticError`` on write.
    """

    def __init__(self, data_folder: Path):
        self.data_folder = Path(data_folder)

    def baseline_path(self, identity: str) -> Path:
        return self.data_folder / f"{identity}{BASELINE_SUFFIX}"

    def pending_path(self, identity: str) -> Path:
        return self.data_folder / f"{identity}{PENDING_SUFFIX}"

    def has_baseline(self, identity: str) -> bool:
        return self.baseline_path(identity).exists()

    def load_baseline(self, identity: str) -> list[str]:
        """Accepted diagnostics, or an empty list if nothing was ever accepted."""
        return self._read_lines(self.baseline_path(identity))

    def load_pending(self, identity: str) -> list[str]:
        return self._read_lines(self.pending_path(identity))

    def save_pending(self, identity: str, lines: Iterable[str]) -> None:
        """Overwrite the pending file with the diagnostics of the latest run."""
        lines = list(lines)
        self._write_lines(self.pending_path(identity), lines)
        logger.debug("Saved %d pending diagnostics for %s", len(lines), identity)

    def promote(self, identity: str, lines: Iterable[str]) -> None:
        """Replace the baseline with ``lines`` and clear the pending file.

        The baseline is written first. If clearing pending fails afterwards the
        resource is still listed as pending; accepting its review result again
        finishes the clear.
        """
        lines = list(lines)
        self._write_lines(self.baseline_path(identity), lines)
        self._write_lines(self.pending_path(identity), [])
        logger.info("Accepted baseline for %s (%d diagnostics)", identity, len(lines))

    def enumerate_pending_identities(self) -> Iterator[str]:
        """Yield every identity whose pending file is non-empty.

        The directory is listed afresh on each call.
        """
        if not self.data_folder.exists():
            return
        for path in sorted(self.data_folder.glob(f"*{PENDING_SUFFIX}")):
            identity = path.name[: -len(PENDING_SUFFIX)]
            if self._read_lines(path):
                yield identity

    def _read_lines(self, path: Path) -> list[str]:
        if not path.exists():
            return []
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreIOError(e.errno, f"Could not read exception file: {e.strerror}", str(path)) from e
        # read_text already folds \r\n from hand-edited files into \n
        return [line for line in text.split("\n") if line.strip()]

    def _write_lines(self, path: Path, lines: list[str]) -> None:
        for line in lines:
            if not line.strip() or "\n" in line or "\r" in line:
                raise InvalidDiagnosticError(
                    f"Diagnostic lines must be non-blank single lines, got {line!r} for {path.name}"
                )
        try:
            atomic_write_text(path, "\n".join(lines))
        except OSError as e:
            raise StoreIOError(e.errno, f"Could not write exception file: {e.strerror}", str(path)) from e

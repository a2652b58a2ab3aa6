"""Atomic text file writes — temp file in the same directory, then os.replace."""

from __future__ import annotations

import errno
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RETRYABLE_ERRNOS = {errno.EACCES, errno.EPERM, errno.EBUSY}


def is_retryable_replace_error(exc: OSError) -> bool:
    return getattr(exc, "errno", None) in _RETRYABLE_ERRNOS


def bounded_retry(fn: Callable[[], T], attempts: int = 5, backoff_ms: int = 50) -> T:
    """Retry ``fn`` on transient replace errors (Windows file locks)."""
    for attempt in range(attempts):
        try:
            return fn()
        except OSError as exc:
            if attempt == attempts - 1 or not is_retryable_replace_error(exc):
                raise
            logger.debug("Replace failed (%s), retrying in %dms", exc, backoff_ms)
            time.sleep(backoff_ms / 1000.0)
    raise RuntimeError("bounded_retry called with attempts < 1")


def atomic_write_text(path: Path, text: str, attempts: int = 5, backoff_ms: int = 50) -> None:
    """Write ``text`` to ``path`` so readers see either the old or the new file."""
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="\n",
            dir=str(path.parent),
            prefix=path.name + ".",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        bounded_retry(lambda: os.replace(temp_path, path), attempts=attempts, backoff_ms=backoff_ms)
    finally:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink(missing_ok=True)

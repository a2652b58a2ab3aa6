"""Data folder resolution for validation result files."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

ROOT_ENV_VAR = "HTML_VALIDATION_ROOT"
DATA_DIR_NAME = ".validation"


def default_data_folder() -> Path:
    """Project root from ``$HTML_VALIDATION_ROOT`` if set, else the temp dir.

    Keeping results under the project root lets accepted exceptions be
    committed alongside the source.
    """
    root = os.environ.get(ROOT_ENV_VAR)
    if root:
        return Path(root) / DATA_DIR_NAME
    return Path(tempfile.gettempdir()) / DATA_DIR_NAME


def ensure_data_folder(path: str | Path) -> Path:
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Using validation data folder %s", path)
    return path

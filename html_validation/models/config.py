"""Configuration models for HTML validation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TIDY_FLAGS: tuple[str, ...] = ("-quiet", "-indent")

# Tidy reports warnings unless told otherwise
HIDE_WARNINGS_FLAG = "--show-warnings false"


def with_show_warnings(flags: tuple[str, ...] | list[str], show: bool) -> tuple[str, ...]:
    """Return a copy of ``flags`` with warnings switched on or off.

    Changing this (or any flag) changes the diagnostics tidy emits, so
    previously accepted resources will usually need another review pass.
    """
    without = tuple(f for f in flags if f != HIDE_WARNINGS_FLAG)
    if show:
        return without
    return without + (HIDE_WARNINGS_FLAG,)


class ValidationOptions(BaseModel):
    """Per-session options handed to every validation.

    ``tidy_flags`` are whole tidy settings such as ``"--show-warnings false"``,
    not name/value pairs.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    ignore_proprietary: bool = False
    tidy_flags: tuple[str, ...] = Field(default_factory=lambda: DEFAULT_TIDY_FLAGS)

    @field_validator("tidy_flags", mode="before")
    @classmethod
    def reject_bare_string(cls, v):
        if isinstance(v, str):
            raise ValueError("tidy_flags must be a sequence of flag strings, not a single string")
        return v


class ValidationConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Storage
    data_folder: Optional[str] = None

    # Checker
    tidy_command: str = "tidy"
    tidy_timeout_seconds: Optional[float] = None

    options: ValidationOptions = Field(default_factory=ValidationOptions)

    @classmethod
    def load(cls, path: str | Path) -> "ValidationConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

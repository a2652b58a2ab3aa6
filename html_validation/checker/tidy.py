"""HTML Tidy checker — runs the tidy binary and collects its diagnostics."""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import Optional, Sequence

from html_validation.checker.base import drop_proprietary
from html_validation.errors import CheckerUnavailable

logger = logging.getLogger(__name__)

# 0 = clean, 1 = warnings, 2 = errors. Anything else means tidy itself failed.
DIAGNOSTIC_EXIT_CODES = (0, 1, 2)


class TidyChecker:
    """Feeds HTML to ``tidy`` on stdin and reads diagnostics from stderr."""

    def __init__(self, command: str = "tidy", timeout: Optional[float] = None):
        self.command = command
        self.timeout = timeout

    def build_args(self, flags: Sequence[str]) -> list[str]:
        # A flag may be a whole setting like "--show-warnings false"
        args = [self.command]
        for flag in flags:
            args.extend(shlex.split(flag))
        return args

    def check(self, html: str, flags: Sequence[str], ignore_proprietary: bool = False) -> list[str]:
        args = self.build_args(flags)
        logger.debug("Running %s", " ".join(args))
        try:
            proc = subprocess.run(
                args,
                input=html,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise CheckerUnavailable(f"Tidy executable not found: {self.command}") from e
        except subprocess.TimeoutExpired as e:
            raise CheckerUnavailable(f"Tidy did not finish within {self.timeout}s") from e
        except OSError as e:
            raise CheckerUnavailable(f"Could not run {self.command}: {e}") from e

        if proc.returncode not in DIAGNOSTIC_EXIT_CODES:
            raise CheckerUnavailable(
                f"{self.command} exited with status {proc.returncode}: {proc.stderr.strip()}"
            )

        lines = [line for line in proc.stderr.splitlines() if line.strip()]
        if ignore_proprietary:
            lines = drop_proprietary(lines)
        logger.debug("Tidy reported %d diagnostics (exit %d)", len(lines), proc.returncode)
        return lines

"""Append-only changelog and diagnostics collected during a run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    level: str
    message: str
    path: Path | None = None

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


class UpgradeLog:
    """Human-readable output of an upgrade run.

    Changelog lines keep insertion order and are never duplicated.
    """

    def __init__(self) -> None:
        self._changelog: list[str] = []
        self._diagnostics: list[Diagnostic] = []

    def add_changelog(self, line: str) -> None:
        if line not in self._changelog:
            self._changelog.append(line)

    def warn(self, message: str, path: Path | None = None) -> None:
        logger.warning("%s", Diagnostic("warning", message, path))
        self._diagnostics.append(Diagnostic("warning", message, path))

    def error(self, message: str, path: Path | None = None) -> None:
        logger.error("%s", Diagnostic("error", message, path))
        self._diagnostics.append(Diagnostic("error", message, path))

    @property
    def changelog(self) -> tuple[str, ...]:
        return tuple(self._changelog)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self._diagnostics if d.level == "warning")

"""Outcomes of processing files and categories."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from pathlib import Path


class Stage(StrEnum):
    """Where processing of a file ended."""

    DISCOVER = "discover"
    PARSE = "parse"
    LOCATE = "locate"
    NO_CHANGE = "no-change"
    PATCH = "patch"
    WRITE = "write"


class ProcessingResult(IntEnum):
    """Ordered outcome scale; the worst outcome wins when combining."""

    NONE = 0
    SUCCESS = 1
    WARNING = 2
    ERROR = 3

    def max(self, other: "ProcessingResult") -> "ProcessingResult":
        return self if self >= other else other


@dataclass
class FileOutcome:
    """What happened to one file."""

    path: Path
    result: ProcessingResult
    stage: Stage = Stage.NO_CHANGE
    changed: bool = False
    edits: int = 0
    messages: list[str] = field(default_factory=list)


@dataclass
class CategoryResult:
    """Aggregated outcome of one upgrader over its file set."""

    upgrader_id: str
    description: str
    result: ProcessingResult = ProcessingResult.NONE
    files: list[FileOutcome] = field(default_factory=list)
    changelog: str | None = None
    skipped: str | None = None

    @property
    def changed_files(self) -> list[Path]:
        return [f.path for f in self.files if f.changed]

    def add(self, outcome: FileOutcome) -> None:
        self.files.append(outcome)
        self.result = self.result.max(outcome.result)


@dataclass
class RunReport:
    """Results of a whole upgrade run, in upgrader priority order."""

    channel: str
    dry_run: bool = False
    categories: list[CategoryResult] = field(default_factory=list)
    changelog: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def result(self) -> ProcessingResult:
        overall = ProcessingResult.NONE
        for category in self.categories:
            overall = overall.max(category.result)
        return overall

    @property
    def changed_files(self) -> list[Path]:
        return [path for category in self.categories for path in category.changed_files]

    def to_dict(self) -> dict[str, object]:
        return {
            "channel": self.channel,
            "dry_run": self.dry_run,
            "result": self.result.name.lower(),
            "changelog": list(self.changelog),
            "warnings": list(self.warnings),
            "categories": [
                {
                    "id": category.upgrader_id,
                    "description": category.description,
                    "result": category.result.name.lower(),
                    "skipped": category.skipped,
                    "files": [
                        {
                            "path": str(outcome.path),
                            "result": outcome.result.name.lower(),
                            "stage": outcome.stage.value,
                            "changed": outcome.changed,
                            "edits": outcome.edits,
                            "messages": list(outcome.messages),
                        }
                        for outcome in category.files
                    ],
                }
                for category in self.categories
            ],
        }

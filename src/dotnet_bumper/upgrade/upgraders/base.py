"""Base class for upgraders: one upgrader per category of files."""

from __future__ import annotations

import fnmatch
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import ClassVar

from dotnet_bumper.cancellation import CancellationToken
from dotnet_bumper.config import BumperConfiguration
from dotnet_bumper.container_registry import ContainerRegistryClient
from dotnet_bumper.documents import (
    Candidate,
    DockerfileLocator,
    DocumentLocator,
    EditSpan,
    JsonLocator,
    ScalarSite,
    SourceDocument,
    TokenSelector,
    XmlLocator,
    YamlLocator,
)
from dotnet_bumper.versioning import UpgradeChannel

from ..decision import UpgradePolicy
from ..log_context import UpgradeLog

logger = logging.getLogger(__name__)

EXCLUDED_DIRECTORIES = frozenset({".git", ".vs", "bin", "obj", "node_modules"})

LOCATORS: dict[str, type[DocumentLocator]] = {
    "dockerfile": DockerfileLocator,
    "json": JsonLocator,
    "xml": XmlLocator,
    "yaml": YamlLocator,
}

MSBUILD_PATTERNS = (
    "Directory.Build.props",
    "*.csproj",
    "*.fsproj",
    "*.vbproj",
    "*.pubxml",
)


@dataclass
class UpgradeContext:
    """Everything an upgrader may consult while processing one run."""

    project_path: Path
    channel: UpgradeChannel
    policy: UpgradePolicy = field(default_factory=UpgradePolicy)
    dry_run: bool = False
    config: BumperConfiguration = field(default_factory=BumperConfiguration)
    digests: ContainerRegistryClient | None = None
    cancellation: CancellationToken = field(default_factory=CancellationToken)
    log: UpgradeLog = field(default_factory=UpgradeLog)


def is_property(site: ScalarSite) -> bool:
    """Return True for ``<Project><PropertyGroup><Name>`` values."""
    return len(site.path) == 3 and site.path[:2] == ("Project", "PropertyGroup")


def match_any(path: PurePosixPath, patterns: tuple[str, ...] | list[str]) -> bool:
    posix = path.as_posix()
    return any(path.match(p) or fnmatch.fnmatch(posix, p) for p in patterns)


def pin_digest(
    path: Path, candidate: Candidate, replacement: str, context: UpgradeContext
) -> str:
    """Re-pin *replacement* to a digest if the original reference had one."""
    if candidate.token.digest is None or context.digests is None:
        return replacement

    image, sep, tag = replacement.rpartition(":")
    if not sep or "/" in tag:
        return replacement

    digest = context.digests.get_image_digest(image, tag)
    if digest is None:
        context.log.warn(
            f"Could not resolve the digest for {image}:{tag}; the digest was removed.",
            path,
        )
        return replacement
    return f"{replacement}@{digest}"


class BaseUpgrader:
    """An upgrader for one category of files.

    Subclasses declare their files and the places tokens live as data; the
    runner does the reading, deciding and writing.
    """

    upgrader_id: ClassVar[str] = ""
    description: ClassVar[str] = ""
    patterns: ClassVar[tuple[str, ...]] = ()
    priority: ClassVar[int] = 100
    file_format: ClassVar[str] = "yaml"
    excluded_directories: ClassVar[frozenset[str]] = EXCLUDED_DIRECTORIES

    def find_files(self, project_path: Path, exclude: list[str] | None = None) -> list[Path]:
        """Return files under *project_path* matching ``patterns``, sorted."""
        exclude = exclude or []
        found: list[Path] = []
        for directory, dirnames, filenames in os.walk(project_path):
            dirnames[:] = sorted(d for d in dirnames if d not in self.excluded_directories)
            for name in filenames:
                path = Path(directory) / name
                relative = PurePosixPath(path.relative_to(project_path).as_posix())
                if not match_any(relative, self.patterns):
                    continue
                if match_any(relative, exclude):
                    logger.debug("Skipping excluded file %s", relative)
                    continue
                found.append(path)
        return sorted(found)

    def locator_for(self, path: Path, text: str) -> DocumentLocator:
        return LOCATORS[self.file_format]()

    def is_relevant(self, text: str) -> bool:
        """Cheap text check run before parsing; irrelevant files are skipped."""
        return True

    def selectors(self, channel: UpgradeChannel) -> list[TokenSelector]:
        raise NotImplementedError

    def changelog_entry(self, channel: UpgradeChannel) -> str:
        raise NotImplementedError

    def finalize(
        self, path: Path, candidate: Candidate, replacement: str, context: UpgradeContext
    ) -> str:
        """Adjust a replacement before it is written. Returns it unchanged by default."""
        return replacement

    def plan_edits(
        self, document: SourceDocument, replacements: list[tuple[Candidate, str]]
    ) -> list[EditSpan]:
        """Turn decided replacements into edits, one per candidate by default."""
        return [EditSpan(candidate.span, text) for candidate, text in replacements]

    def can_apply(self, context: UpgradeContext) -> tuple[bool, str]:
        return True, ""

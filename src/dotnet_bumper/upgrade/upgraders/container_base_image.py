"""Upgrader: ``ContainerBaseImage`` used by SDK container publishing."""

from __future__ import annotations

from pathlib import Path

from dotnet_bumper.documents import Candidate, ScalarSite, TokenSelector
from dotnet_bumper.versioning import TokenKind, UpgradeChannel

from ..registry import UpgraderRegistry
from .base import MSBUILD_PATTERNS, BaseUpgrader, UpgradeContext, is_property, pin_digest

UPGRADER_ID = "container-base-image"
UPGRADER_DESCRIPTION = "Update container base images in MSBuild files"


def is_base_image(site: ScalarSite) -> bool:
    return is_property(site) and site.key == "ContainerBaseImage"


@UpgraderRegistry.register
class ContainerBaseImageUpgrader(BaseUpgrader):
    upgrader_id = UPGRADER_ID
    description = UPGRADER_DESCRIPTION
    patterns = MSBUILD_PATTERNS
    priority = 40
    file_format = "xml"

    def is_relevant(self, text: str) -> bool:
        return "ContainerBaseImage" in text

    def selectors(self, channel: UpgradeChannel) -> list[TokenSelector]:
        return [TokenSelector("container-base-image", TokenKind.IMAGE_TAG, is_base_image)]

    def finalize(
        self, path: Path, candidate: Candidate, replacement: str, context: UpgradeContext
    ) -> str:
        return pin_digest(path, candidate, replacement, context)

    def changelog_entry(self, channel: UpgradeChannel) -> str:
        return f"Update container base images to .NET {channel}"

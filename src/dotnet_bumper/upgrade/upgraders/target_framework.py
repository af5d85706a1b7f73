"""Upgrader: target framework monikers in MSBuild files.

Any ``PropertyGroup`` property may hold a moniker: ``TargetFramework``,
``TargetFrameworks`` and output paths such as ``PublishDir`` in publish
profiles, where the moniker is one segment of the path.
"""

from __future__ import annotations

from dotnet_bumper.documents import TokenSelector
from dotnet_bumper.versioning import TokenKind, UpgradeChannel

from ..registry import UpgraderRegistry
from .base import MSBUILD_PATTERNS, BaseUpgrader, is_property

UPGRADER_ID = "target-framework"
UPGRADER_DESCRIPTION = "Update target frameworks in MSBuild project and property files"


@UpgraderRegistry.register
class TargetFrameworkUpgrader(BaseUpgrader):
    upgrader_id = UPGRADER_ID
    description = UPGRADER_DESCRIPTION
    patterns = MSBUILD_PATTERNS
    priority = 20
    file_format = "xml"

    def selectors(self, channel: UpgradeChannel) -> list[TokenSelector]:
        return [
            TokenSelector("property", TokenKind.FRAMEWORK_MONIKER, is_property, specificity=10),
            TokenSelector(
                "property-path",
                TokenKind.FRAMEWORK_MONIKER,
                is_property,
                path_segments=True,
            ),
        ]

    def changelog_entry(self, channel: UpgradeChannel) -> str:
        return f"Update target framework to `{channel.moniker}`"

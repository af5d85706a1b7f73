"""Upgrader: output paths in ``.vscode/launch.json``."""

from __future__ import annotations

from dotnet_bumper.documents import ScalarSite, TokenSelector
from dotnet_bumper.versioning import TokenKind, UpgradeChannel

from ..registry import UpgraderRegistry
from .base import BaseUpgrader

UPGRADER_ID = "vscode"
UPGRADER_DESCRIPTION = "Update target frameworks in Visual Studio Code launch configurations"


def is_configuration_value(site: ScalarSite) -> bool:
    return bool(site.path) and site.path[0] == "configurations"


@UpgraderRegistry.register
class VsCodeUpgrader(BaseUpgrader):
    upgrader_id = UPGRADER_ID
    description = UPGRADER_DESCRIPTION
    patterns = (".vscode/launch.json",)
    priority = 100
    file_format = "json"

    def selectors(self, channel: UpgradeChannel) -> list[TokenSelector]:
        return [
            TokenSelector(
                "configuration-path",
                TokenKind.FRAMEWORK_MONIKER,
                is_configuration_value,
                path_segments=True,
            )
        ]

    def changelog_entry(self, channel: UpgradeChannel) -> str:
        return f"Update Visual Studio Code launch configuration to `{channel.moniker}`"

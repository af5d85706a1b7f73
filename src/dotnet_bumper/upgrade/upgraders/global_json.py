"""Upgrader: the SDK version pinned in ``global.json``."""

from __future__ import annotations

from dotnet_bumper.documents import ScalarSite, TokenSelector
from dotnet_bumper.versioning import TokenKind, UpgradeChannel

from ..registry import UpgraderRegistry
from .base import BaseUpgrader

UPGRADER_ID = "global-json"
UPGRADER_DESCRIPTION = "Update the .NET SDK version in global.json"


def is_sdk_version(site: ScalarSite) -> bool:
    return site.path == ("sdk", "version")


@UpgraderRegistry.register
class GlobalJsonUpgrader(BaseUpgrader):
    """Pin ``sdk.version`` to the channel's SDK."""

    upgrader_id = UPGRADER_ID
    description = UPGRADER_DESCRIPTION
    patterns = ("global.json",)
    priority = 10
    file_format = "json"

    def is_relevant(self, text: str) -> bool:
        return '"sdk"' in text

    def selectors(self, channel: UpgradeChannel) -> list[TokenSelector]:
        return [TokenSelector("sdk-version", TokenKind.REGISTRY_SEMVER, is_sdk_version)]

    def changelog_entry(self, channel: UpgradeChannel) -> str:
        return f"Update .NET SDK to `{channel.sdk_version}`"

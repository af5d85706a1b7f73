"""Upgrader: Lambda runtimes in Serverless Framework ``serverless.yml``."""

from __future__ import annotations

from dotnet_bumper.documents import ScalarSite, TokenSelector
from dotnet_bumper.versioning import TokenKind, UpgradeChannel

from ..registry import UpgraderRegistry
from .base import BaseUpgrader

UPGRADER_ID = "serverless"
UPGRADER_DESCRIPTION = "Update Serverless Framework Lambda runtimes"


def is_runtime(site: ScalarSite) -> bool:
    """``provider.runtime`` or ``functions.<name>.runtime``."""
    if site.key != "runtime" or not site.path:
        return False
    if site.path == ("provider", "runtime"):
        return True
    return len(site.path) == 3 and site.path[0] == "functions"


@UpgraderRegistry.register
class ServerlessUpgrader(BaseUpgrader):
    upgrader_id = UPGRADER_ID
    description = UPGRADER_DESCRIPTION
    patterns = ("serverless.yml", "serverless.yaml")
    priority = 90
    file_format = "yaml"

    def selectors(self, channel: UpgradeChannel) -> list[TokenSelector]:
        return [TokenSelector("runtime", TokenKind.MANAGED_RUNTIME, is_runtime)]

    def changelog_entry(self, channel: UpgradeChannel) -> str:
        return f"Update Serverless Lambda runtime to `{channel.managed_runtime}`"

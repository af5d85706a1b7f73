"""Upgrader: ``aws-lambda-tools-defaults.json`` used by Amazon.Lambda.Tools."""

from __future__ import annotations

from dotnet_bumper.documents import ScalarSite, TokenSelector
from dotnet_bumper.versioning import TokenKind, UpgradeChannel

from ..registry import UpgraderRegistry
from .base import BaseUpgrader

UPGRADER_ID = "aws-lambda-tools"
UPGRADER_DESCRIPTION = "Update AWS Lambda Tools defaults"

LAMBDA_TOOLS_DEFAULTS = "aws-lambda-tools-defaults.json"


def _top_level(site: ScalarSite, name: str) -> bool:
    return site.path == (name,)


@UpgraderRegistry.register
class AwsLambdaToolsUpgrader(BaseUpgrader):
    upgrader_id = UPGRADER_ID
    description = UPGRADER_DESCRIPTION
    patterns = (LAMBDA_TOOLS_DEFAULTS,)
    priority = 70
    file_format = "json"

    def selectors(self, channel: UpgradeChannel) -> list[TokenSelector]:
        return [
            TokenSelector(
                "framework",
                TokenKind.FRAMEWORK_MONIKER,
                lambda site: _top_level(site, "framework"),
            ),
            TokenSelector(
                "function-runtime",
                TokenKind.MANAGED_RUNTIME,
                lambda site: _top_level(site, "function-runtime"),
            ),
        ]

    def changelog_entry(self, channel: UpgradeChannel) -> str:
        return f"Update AWS Lambda runtime to `{channel.managed_runtime}`"

"""Upgrader: ``dotnet-version`` inputs of ``actions/setup-dotnet`` steps."""

from __future__ import annotations

from dotnet_bumper.documents import ScalarSite, TokenSelector
from dotnet_bumper.versioning import TokenKind, UpgradeChannel

from ..registry import UpgraderRegistry
from .base import BaseUpgrader

UPGRADER_ID = "github-actions"
UPGRADER_DESCRIPTION = "Update the .NET SDK installed by GitHub Actions workflows"

SETUP_DOTNET_ACTION = "actions/setup-dotnet@"


def is_setup_dotnet_version(site: ScalarSite) -> bool:
    """Match ``with: dotnet-version:`` of a step that uses setup-dotnet."""
    if site.key != "dotnet-version" or site.parent_key != "with":
        return False
    if len(site.scopes) < 2:
        return False
    uses = site.scopes[-2].get("uses", "")
    return uses.startswith(SETUP_DOTNET_ACTION)


@UpgraderRegistry.register
class GitHubActionsUpgrader(BaseUpgrader):
    upgrader_id = UPGRADER_ID
    description = UPGRADER_DESCRIPTION
    patterns = (".github/workflows/*.yml", ".github/workflows/*.yaml")
    priority = 60
    file_format = "yaml"

    def is_relevant(self, text: str) -> bool:
        return SETUP_DOTNET_ACTION in text

    def selectors(self, channel: UpgradeChannel) -> list[TokenSelector]:
        return [
            TokenSelector("setup-dotnet", TokenKind.FLOATING_CHANNEL, is_setup_dotnet_version)
        ]

    def changelog_entry(self, channel: UpgradeChannel) -> str:
        return f"Update .NET SDK in GitHub Actions workflows to `{channel}`"

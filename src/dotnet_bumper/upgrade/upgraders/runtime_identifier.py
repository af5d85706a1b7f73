"""Upgrader: runtime identifiers in MSBuild files.

From .NET 8 the SDK only ships portable runtime identifiers, so
version-specific ones such as ``win10-x64`` are normalized to ``win-x64``.
"""

from __future__ import annotations

from dotnet_bumper.documents import TokenSelector
from dotnet_bumper.versioning import TokenKind, UpgradeChannel

from ..registry import UpgraderRegistry
from .base import MSBUILD_PATTERNS, BaseUpgrader, UpgradeContext, is_property

UPGRADER_ID = "runtime-identifier"
UPGRADER_DESCRIPTION = "Normalize runtime identifiers to their portable form"


@UpgraderRegistry.register
class RuntimeIdentifierUpgrader(BaseUpgrader):
    upgrader_id = UPGRADER_ID
    description = UPGRADER_DESCRIPTION
    patterns = MSBUILD_PATTERNS
    priority = 30
    file_format = "xml"

    def can_apply(self, context: UpgradeContext) -> tuple[bool, str]:
        minimum = context.policy.portable_rid_minimum
        if context.channel.version < minimum:
            return False, f"Portable runtime identifiers are only required from .NET {minimum[0]}"
        return True, ""

    def selectors(self, channel: UpgradeChannel) -> list[TokenSelector]:
        return [
            TokenSelector("property", TokenKind.RUNTIME_IDENTIFIER, is_property, specificity=10),
            TokenSelector(
                "property-path",
                TokenKind.RUNTIME_IDENTIFIER,
                is_property,
                path_segments=True,
            ),
        ]

    def changelog_entry(self, channel: UpgradeChannel) -> str:
        return "Update runtime identifiers"

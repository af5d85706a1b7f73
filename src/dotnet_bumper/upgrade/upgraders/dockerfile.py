"""Upgrader: base images in Dockerfile ``FROM`` instructions, and the
legacy HTTP port in ``EXPOSE`` once images run as a non-root user.

Tags pinned to a digest are pinned again to the digest the new tag points
to, when digest resolution is enabled.
"""

from __future__ import annotations

from pathlib import Path

from dotnet_bumper.documents import Candidate, ScalarSite, TokenSelector
from dotnet_bumper.versioning import TokenKind, UpgradeChannel

from ..registry import UpgraderRegistry
from .base import BaseUpgrader, UpgradeContext, pin_digest

UPGRADER_ID = "dockerfile"
UPGRADER_DESCRIPTION = "Update .NET container images in Dockerfiles"


def is_from_image(site: ScalarSite) -> bool:
    return site.siblings.get("instruction") == "FROM"


def is_exposed_port(site: ScalarSite) -> bool:
    return site.siblings.get("instruction") == "EXPOSE"


@UpgraderRegistry.register
class DockerfileUpgrader(BaseUpgrader):
    upgrader_id = UPGRADER_ID
    description = UPGRADER_DESCRIPTION
    patterns = ("Dockerfile", "*.Dockerfile", "*.dockerfile", "Dockerfile.*")
    priority = 50
    file_format = "dockerfile"

    def selectors(self, channel: UpgradeChannel) -> list[TokenSelector]:
        return [
            TokenSelector("from", TokenKind.IMAGE_TAG, is_from_image),
            TokenSelector("expose", TokenKind.CONTAINER_PORT, is_exposed_port),
        ]

    def finalize(
        self, path: Path, candidate: Candidate, replacement: str, context: UpgradeContext
    ) -> str:
        if candidate.token.kind == TokenKind.CONTAINER_PORT:
            context.log.warn(
                f"Exposed port {candidate.token.raw} was changed to {replacement}; review whether "
                "any container orchestration configuration is compatible with the change.",
                path,
            )
            return replacement
        return pin_digest(path, candidate, replacement, context)

    def changelog_entry(self, channel: UpgradeChannel) -> str:
        return f"Update Dockerfile base images to .NET {channel}"

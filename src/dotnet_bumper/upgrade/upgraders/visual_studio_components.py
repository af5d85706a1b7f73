"""Upgrader: .NET runtime components in Visual Studio ``.vsconfig`` files.

A single older runtime component is replaced. When several are listed, the
new component is added after the last of them so the older runtimes stay
installed. Nothing changes if the component is already listed.
"""

from __future__ import annotations

from dotnet_bumper.documents import (
    Candidate,
    EditSpan,
    ScalarSite,
    SourceDocument,
    SourceSpan,
    TokenSelector,
)
from dotnet_bumper.versioning import TokenKind, UpgradeChannel
from dotnet_bumper.versioning.components import RUNTIME_COMPONENT_PREFIX

from ..registry import UpgraderRegistry
from .base import BaseUpgrader

UPGRADER_ID = "visual-studio-components"
UPGRADER_DESCRIPTION = "Update .NET runtime components in Visual Studio configuration"

DEFAULT_SEPARATOR = ", "


def is_component(site: ScalarSite) -> bool:
    return len(site.path) == 2 and site.path[0] == "components" and isinstance(site.path[1], int)


def _separator(text: str, last: ScalarSite) -> str:
    # Copy the whitespace used before the last entry, e.g. ",\n    ".
    opening_quote = last.span.start - 1
    comma = text.rfind(",", 0, opening_quote)
    if comma < 0 or text[comma + 1 : opening_quote].strip():
        return DEFAULT_SEPARATOR
    return text[comma:opening_quote]


@UpgraderRegistry.register
class VisualStudioComponentUpgrader(BaseUpgrader):
    upgrader_id = UPGRADER_ID
    description = UPGRADER_DESCRIPTION
    patterns = (".vsconfig",)
    priority = 110
    file_format = "json"

    def is_relevant(self, text: str) -> bool:
        return RUNTIME_COMPONENT_PREFIX in text

    def selectors(self, channel: UpgradeChannel) -> list[TokenSelector]:
        return [TokenSelector("component", TokenKind.VISUAL_STUDIO_COMPONENT, is_component)]

    def plan_edits(
        self, document: SourceDocument, replacements: list[tuple[Candidate, str]]
    ) -> list[EditSpan]:
        component = replacements[0][1]
        if any(is_component(site) and site.value == component for site in document.scalars()):
            return []
        if len(replacements) == 1:
            return super().plan_edits(document, replacements)

        last = max((candidate for candidate, _ in replacements), key=lambda c: c.span.start)
        after = last.span.end + 1
        separator = _separator(document.text, last.site)
        return [EditSpan(SourceSpan(after, after), f'{separator}"{component}"')]

    def changelog_entry(self, channel: UpgradeChannel) -> str:
        return f"Update Visual Studio components to .NET {channel}"

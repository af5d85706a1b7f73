"""Kind-dispatched parse, compare and format operations."""

from __future__ import annotations

from types import ModuleType

from . import components, floating, images, monikers, ports, rids, runtimes, semver
from .models import Ordering, ParseFailure, TokenKind, UpgradeChannel, VersionToken

_GRAMMARS: dict[TokenKind, ModuleType] = {
    TokenKind.FRAMEWORK_MONIKER: monikers,
    TokenKind.REGISTRY_SEMVER: semver,
    TokenKind.RUNTIME_IDENTIFIER: rids,
    TokenKind.MANAGED_RUNTIME: runtimes,
    TokenKind.FLOATING_CHANNEL: floating,
    TokenKind.IMAGE_TAG: images,
    TokenKind.CONTAINER_PORT: ports,
    TokenKind.VISUAL_STUDIO_COMPONENT: components,
}

_PARSERS = {
    TokenKind.FRAMEWORK_MONIKER: monikers.parse_moniker,
    TokenKind.REGISTRY_SEMVER: semver.parse_semver,
    TokenKind.RUNTIME_IDENTIFIER: rids.parse_rid,
    TokenKind.MANAGED_RUNTIME: runtimes.parse_runtime,
    TokenKind.FLOATING_CHANNEL: floating.parse_floating,
    TokenKind.IMAGE_TAG: images.parse_image,
    TokenKind.CONTAINER_PORT: ports.parse_port,
    TokenKind.VISUAL_STUDIO_COMPONENT: components.parse_component,
}


def parse(text: str, kind: TokenKind) -> VersionToken | ParseFailure:
    """Parse *text* with the grammar for *kind*.

    Malformed input is returned as a ``ParseFailure`` rather than raised, so
    callers can skip text that is not a version of this kind.
    """
    if not text:
        return ParseFailure(text, kind, "empty value")
    return _PARSERS[kind](text)


def compare(a: VersionToken, b: VersionToken) -> Ordering:
    """Order two tokens by SemVer precedence of their numeric value.

    Missing minor and patch segments compare as zero and a prerelease ranks
    below the matching release.
    """
    left = semver.to_semver(a)
    right = semver.to_semver(b)
    if left < right:
        return Ordering.LESS
    if left > right:
        return Ordering.GREATER
    return Ordering.EQUAL


def is_at_least(token: VersionToken, channel: UpgradeChannel) -> bool:
    """Return True when *token* needs no upgrade to reach *channel*."""
    return _GRAMMARS[token.kind].is_at_least(token, channel)


def format_upgraded(token: VersionToken, channel: UpgradeChannel) -> str:
    """Return the text *token* should be rewritten to for *channel*.

    Tokens already at or beyond the channel format back to their raw text.
    """
    return _GRAMMARS[token.kind].format_upgraded(token, channel)

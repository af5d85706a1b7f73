"""Registry semantic versions, as pinned by ``global.json``."""

from __future__ import annotations

import semantic_version

from .models import ParseFailure, TokenKind, UpgradeChannel, VersionToken

KIND = TokenKind.REGISTRY_SEMVER


def parse_semver(text: str) -> VersionToken | ParseFailure:
    try:
        version = semantic_version.Version(text)
    except ValueError as exc:
        return ParseFailure(text, KIND, str(exc))

    return VersionToken(
        raw=text,
        kind=KIND,
        major=version.major,
        minor=version.minor,
        patch=version.patch,
        prerelease=tuple(version.prerelease),
        precision=3,
        suffix=f"+{'.'.join(version.build)}" if version.build else "",
    )


def to_semver(token: VersionToken) -> semantic_version.Version:
    """Return the SemVer 2.0 value of any token, ignoring build metadata."""
    return semantic_version.Version(
        major=token.major,
        minor=token.minor,
        patch=token.patch,
        prerelease=token.prerelease,
    )


def is_at_least(token: VersionToken, channel: UpgradeChannel) -> bool:
    return to_semver(token) >= channel.sdk_version


def format_upgraded(token: VersionToken, channel: UpgradeChannel) -> str:
    if is_at_least(token, channel):
        return token.raw
    return str(channel.sdk_version)

"""Managed runtime strings used by AWS Lambda, e.g. ``dotnet8``."""

from __future__ import annotations

import re

from .models import ParseFailure, TokenKind, UpgradeChannel, VersionToken

KIND = TokenKind.MANAGED_RUNTIME

# Lambda has offered a managed runtime for every LTS since .NET 6.
MINIMUM_MANAGED_RUNTIME = 6

_RUNTIME_RE = re.compile(r"^dotnet(?P<major>[1-9][0-9]*)$")
_LEGACY_RUNTIME_RE = re.compile(r"^dotnetcore(?P<major>[1-9])\.(?P<minor>[0-9])$")


def parse_runtime(text: str) -> VersionToken | ParseFailure:
    match = _RUNTIME_RE.match(text)
    if match is not None:
        major = int(match["major"])
        return VersionToken(
            raw=text,
            kind=KIND,
            major=major,
            precision=1,
            prefix="dotnet",
            upgradable=major >= MINIMUM_MANAGED_RUNTIME,
        )

    legacy = _LEGACY_RUNTIME_RE.match(text)
    if legacy is not None:
        return VersionToken(
            raw=text,
            kind=KIND,
            major=int(legacy["major"]),
            minor=int(legacy["minor"]),
            prefix="dotnetcore",
            upgradable=False,
        )

    return ParseFailure(text, KIND, "not a managed runtime")


def is_at_least(token: VersionToken, channel: UpgradeChannel) -> bool:
    if not token.upgradable:
        return True
    return token.major >= channel.major


def format_upgraded(token: VersionToken, channel: UpgradeChannel) -> str:
    if is_at_least(token, channel):
        return token.raw
    return channel.managed_runtime

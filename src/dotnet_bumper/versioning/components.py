"""Visual Studio workload components such as
``Microsoft.NetCore.Component.Runtime.8.0`` listed in ``.vsconfig``."""

from __future__ import annotations

import re

from .models import ParseFailure, TokenKind, UpgradeChannel, VersionToken

KIND = TokenKind.VISUAL_STUDIO_COMPONENT

RUNTIME_COMPONENT_PREFIX = "Microsoft.NetCore.Component.Runtime."

_COMPONENT_RE = re.compile(
    r"^" + re.escape(RUNTIME_COMPONENT_PREFIX) + r"(?P<version>[0-9]+(?:\.[0-9]+){1,3})$"
)


def component_for(channel: UpgradeChannel) -> str:
    return f"{RUNTIME_COMPONENT_PREFIX}{channel}"


def parse_component(text: str) -> VersionToken | ParseFailure:
    match = _COMPONENT_RE.match(text)
    if match is None:
        return ParseFailure(text, KIND, "not a .NET runtime component")
    numbers = [int(n) for n in match["version"].split(".")]
    return VersionToken(
        raw=text,
        kind=KIND,
        major=numbers[0],
        minor=numbers[1],
        patch=numbers[2] if len(numbers) > 2 else 0,
        precision=len(numbers),
        prefix=RUNTIME_COMPONENT_PREFIX,
    )


def is_at_least(token: VersionToken, channel: UpgradeChannel) -> bool:
    return (token.major, token.minor) >= channel.version


def format_upgraded(token: VersionToken, channel: UpgradeChannel) -> str:
    if is_at_least(token, channel):
        return token.raw
    return component_for(channel)

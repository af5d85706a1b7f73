"""Target framework monikers such as ``net8.0`` and ``netcoreapp3.1``.

A semicolon-delimited list (``net6.0;net7.0``) parses to a composite token.
Upgrading a list appends the channel moniker when more than one valid
moniker is present and replaces the moniker when it stands alone. Empty
entries left by doubled or trailing separators are ignored, and trailing
separators stay at the end of the list.
"""

from __future__ import annotations

import re
from dataclasses import replace

from .models import ParseFailure, TokenKind, UpgradeChannel, VersionToken

KIND = TokenKind.FRAMEWORK_MONIKER

_MONIKER_RE = re.compile(
    r"^(?P<name>net|netcoreapp|netstandard)"
    r"(?P<version>[1-9][0-9]*(?:\.[0-9]+)*)"
    r"(?P<platform>-[A-Za-z][A-Za-z0-9.]*)?$"
)

# Separators in MSBuild lists may be surrounded by whitespace.
_LIST_SPLIT_RE = re.compile(r"(\s*;\s*)")
_TRAILING_RE = re.compile(r"(?:\s*;\s*)+$")


def parse_moniker(text: str) -> VersionToken | ParseFailure:
    """Parse a single moniker or a semicolon-delimited list of monikers."""
    if ";" in text:
        return _parse_list(text)
    return _parse_single(text)


def _parse_single(text: str) -> VersionToken | ParseFailure:
    match = _MONIKER_RE.match(text)
    if match is None:
        return ParseFailure(text, KIND, "not a target framework moniker")

    name = match["name"]
    version = match["version"]
    platform = match["platform"] or ""

    if "." not in version:
        # Pre-unification monikers (net48, net472, net35) carry no dot.
        if name != "net":
            return ParseFailure(text, KIND, f"'{name}' requires MAJOR.MINOR")
        return VersionToken(
            raw=text,
            kind=KIND,
            major=int(version[0]),
            minor=int(version[1:2] or 0),
            prefix=name,
            suffix=platform,
            upgradable=False,
        )

    numbers = [int(n) for n in version.split(".")]
    major = numbers[0]
    minor = numbers[1]
    upgradable = name == "netcoreapp" or (name == "net" and major >= 5)
    if name == "net" and major < 5:
        # net4.x written with a dot is still .NET Framework.
        upgradable = False

    return VersionToken(
        raw=text,
        kind=KIND,
        major=major,
        minor=minor,
        precision=len(numbers),
        prefix=name,
        suffix=platform,
        upgradable=upgradable,
    )


def _parse_list(text: str) -> VersionToken | ParseFailure:
    pieces = _LIST_SPLIT_RE.split(text)
    parts: list[VersionToken] = []
    for item in pieces[::2]:
        if not item:
            # Doubled or trailing separators leave empty entries.
            continue
        token = _parse_single(item)
        if isinstance(token, ParseFailure):
            return ParseFailure(text, KIND, f"'{item}' is not a moniker")
        parts.append(token)

    if not parts:
        return ParseFailure(text, KIND, "empty moniker list")
    if len(parts) == 1:
        # A lone moniker is replaced outright, separators included.
        return replace(parts[0], raw=text)

    trailing = _TRAILING_RE.search(text)
    modern = [part for part in parts if part.upgradable]
    if not modern:
        return VersionToken(
            raw=text,
            kind=KIND,
            parts=tuple(parts),
            separator=pieces[1],
            suffix=trailing.group() if trailing else "",
            upgradable=False,
        )

    highest = max(modern, key=lambda part: part.numeric)
    return VersionToken(
        raw=text,
        kind=KIND,
        major=highest.major,
        minor=highest.minor,
        parts=tuple(parts),
        separator=pieces[1],
        suffix=trailing.group() if trailing else "",
    )


def is_at_least(token: VersionToken, channel: UpgradeChannel) -> bool:
    if not token.upgradable:
        return True
    return (token.major, token.minor) >= channel.version


def format_upgraded(token: VersionToken, channel: UpgradeChannel) -> str:
    if is_at_least(token, channel):
        return token.raw

    if token.is_composite:
        body = token.raw[: len(token.raw) - len(token.suffix)]
        return f"{body}{token.separator}{channel.moniker}{token.suffix}"
    return f"{channel.moniker}{token.suffix}"

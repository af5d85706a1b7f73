"""Floating SDK channel expressions, as accepted by ``actions/setup-dotnet``.

Supported forms are ``8``, ``8.0``, ``8.x``, ``8.0.100``, ``8.0.x`` and the
feature band shorthand ``8.0.1xx``. A multi-line value lists several
expressions, one per line.
"""

from __future__ import annotations

import re

from .models import ParseFailure, TokenKind, UpgradeChannel, VersionToken

KIND = TokenKind.FLOATING_CHANNEL

FEATURE_BAND_MULTIPLIER = 100
WILDCARD = "x"

_BAND_RE = re.compile(r"^(?P<band>[1-9])xx$")
_LINE_SPLIT_RE = re.compile(r"(\s*[\r\n]\s*)")


def parse_floating(text: str) -> VersionToken | ParseFailure:
    if "\n" in text or "\r" in text:
        return _parse_lines(text)
    return _parse_single(text)


def _parse_single(text: str) -> VersionToken | ParseFailure:
    segments = text.split(".")
    if not 1 <= len(segments) <= 3:
        return ParseFailure(text, KIND, "expected 1 to 3 segments")

    floating = len(segments) > 1 and segments[-1].endswith(WILDCARD)
    band: int | None = None
    if floating:
        last = segments[-1]
        if last != WILDCARD:
            match = _BAND_RE.match(last)
            if match is None or len(segments) != 3:
                return ParseFailure(text, KIND, f"invalid wildcard segment '{last}'")
            band = int(match["band"])
        numbers = segments[:-1]
    else:
        numbers = segments

    if not all(n.isascii() and n.isdigit() for n in numbers):
        return ParseFailure(text, KIND, "segments must be numeric")

    major = int(numbers[0])
    minor = int(numbers[1]) if len(numbers) > 1 else 0
    patch = 0
    if len(segments) == 3:
        if floating:
            # 8.0.x floats within the first band, 8.0.2xx within band 200.
            patch = (band or 1) * FEATURE_BAND_MULTIPLIER
        else:
            patch = int(numbers[2])

    return VersionToken(
        raw=text,
        kind=KIND,
        major=major,
        minor=minor,
        patch=patch,
        floating=floating,
        precision=len(segments),
        band=band,
    )


def _parse_lines(text: str) -> VersionToken | ParseFailure:
    pieces = _LINE_SPLIT_RE.split(text)
    entries: list[VersionToken] = []
    for item in pieces[::2]:
        token = _parse_single(item)
        if isinstance(token, ParseFailure):
            return ParseFailure(text, KIND, f"'{item}' is not a channel expression")
        entries.append(token)

    if len(entries) == 1:
        return entries[0]

    highest = max(entries, key=lambda entry: entry.numeric)
    return VersionToken(
        raw=text,
        kind=KIND,
        major=highest.major,
        minor=highest.minor,
        patch=highest.patch,
        floating=highest.floating,
        precision=highest.precision,
        band=highest.band,
        parts=tuple(entries),
        separator=pieces[-2],
    )


def _target(token: VersionToken, channel: UpgradeChannel) -> tuple[int, int, int]:
    if token.precision == 3:
        if token.floating:
            return (channel.major, channel.minor, channel.feature_band)
        sdk = channel.sdk_version
        return (sdk.major, sdk.minor, sdk.patch)
    return (channel.major, channel.minor, 0)


def is_at_least(token: VersionToken, channel: UpgradeChannel) -> bool:
    if token.is_composite:
        return any(part.major >= channel.major for part in token.parts)
    return token.numeric >= _target(token, channel)


def _format_single(token: VersionToken, channel: UpgradeChannel) -> str:
    if token.floating:
        head = f"{channel.major}" if token.precision == 2 else f"{channel.major}.{channel.minor}"
        if token.band is None:
            return f"{head}.{WILDCARD}"
        return f"{head}.{channel.feature_band // FEATURE_BAND_MULTIPLIER}xx"

    target = _target(token, channel)
    return ".".join(str(n) for n in target[: token.precision])


def format_upgraded(token: VersionToken, channel: UpgradeChannel) -> str:
    if is_at_least(token, channel):
        return token.raw
    if token.is_composite:
        highest = max(token.parts, key=lambda part: part.numeric)
        return f"{token.raw}{token.separator}{_format_single(highest, channel)}"
    return _format_single(token, channel)

"""Runtime identifiers (RIDs) such as ``win10-x64`` or ``osx.12-arm64``.

Upgrading a RID is portability normalization rather than a version bump:
OS-versioned and distro-specific identifiers are rewritten to the portable
identifier for their OS family. Identifiers with no portable equivalent
(mobile, browser, WASI) are never touched.
"""

from __future__ import annotations

import re

from .models import ParseFailure, TokenKind, UpgradeChannel, VersionToken

KIND = TokenKind.RUNTIME_IDENTIFIER

ARCHITECTURES = (
    "arm64",
    "armel",
    "armv6",
    "arm",
    "loongarch64",
    "ppc64le",
    "riscv64",
    "s390x",
    "wasm",
    "x64",
    "x86",
)

_RID_RE = re.compile(
    r"^(?P<os>[a-z][a-z0-9\-]*?)"
    r"(?P<version>(?:\.[0-9]+)+)?"
    rf"-(?P<arch>{'|'.join(ARCHITECTURES)})"
    r"(?P<qualifier>-[a-z]+)?$"
)

# OS family -> portable OS name.
PORTABLE_OS: dict[str, str] = {
    "win": "win",
    "win7": "win",
    "win8": "win",
    "win81": "win",
    "win10": "win",
    "osx": "osx",
    "linux": "linux",
    "linux-musl": "linux-musl",
    "alpine": "linux-musl",
    "almalinux": "linux",
    "centos": "linux",
    "debian": "linux",
    "fedora": "linux",
    "gentoo": "linux",
    "linuxmint": "linux",
    "manjaro": "linux",
    "ol": "linux",
    "opensuse": "linux",
    "rhel": "linux",
    "rocky": "linux",
    "sles": "linux",
    "tizen": "linux",
    "ubuntu": "linux",
    "freebsd": "freebsd",
    "illumos": "illumos",
    "solaris": "solaris",
}

NON_PORTABLE_OS = frozenset(
    {
        "android",
        "browser",
        "ios",
        "iossimulator",
        "linux-bionic",
        "maccatalyst",
        "tvos",
        "tvossimulator",
        "wasi",
    }
)

_LIST_SPLIT_RE = re.compile(r"(\s*;\s*)")


def parse_rid(text: str) -> VersionToken | ParseFailure:
    """Parse a runtime identifier or a semicolon-delimited list of them."""
    if ";" in text:
        return _parse_list(text)
    return _parse_single(text)


def _parse_single(text: str) -> VersionToken | ParseFailure:
    match = _RID_RE.match(text)
    if match is None:
        return ParseFailure(text, KIND, "not a runtime identifier")

    os_name = match["os"]
    arch = match["arch"]
    portable = PORTABLE_OS.get(os_name)
    if portable is None and os_name not in NON_PORTABLE_OS:
        return ParseFailure(text, KIND, f"unknown operating system '{os_name}'")

    version = [int(n) for n in (match["version"] or "").split(".") if n]
    return VersionToken(
        raw=text,
        kind=KIND,
        major=version[0] if version else 0,
        minor=version[1] if len(version) > 1 else 0,
        precision=len(version),
        prefix=os_name,
        suffix=f"-{arch}{match['qualifier'] or ''}",
        upgradable=portable is not None and (portable != os_name or bool(version)),
    )


def _parse_list(text: str) -> VersionToken | ParseFailure:
    pieces = _LIST_SPLIT_RE.split(text)
    parts: list[VersionToken] = []
    for item in pieces[::2]:
        if not item:
            # Trailing or doubled separators leave empty entries.
            parts.append(VersionToken(raw="", kind=KIND, upgradable=False))
            continue
        token = _parse_single(item)
        if isinstance(token, ParseFailure):
            return ParseFailure(text, KIND, f"'{item}' is not a runtime identifier")
        parts.append(token)

    return VersionToken(
        raw=text,
        kind=KIND,
        parts=tuple(parts),
        separator=pieces[1],
        upgradable=any(part.upgradable for part in parts),
    )


def as_portable(token: VersionToken) -> str:
    """Return the portable form of a single RID, or its raw text if none."""
    portable = PORTABLE_OS.get(token.prefix)
    if portable is None:
        return token.raw
    return f"{portable}{token.suffix}"


def is_at_least(token: VersionToken, channel: UpgradeChannel) -> bool:
    return not token.upgradable


def format_upgraded(token: VersionToken, channel: UpgradeChannel) -> str:
    if not token.is_composite:
        return as_portable(token) if token.upgradable else token.raw

    pieces = _LIST_SPLIT_RE.split(token.raw)
    seen: set[str] = set()
    rendered: list[str] = []
    for index, piece in enumerate(pieces):
        if index % 2:
            rendered.append(piece)
            continue
        part = token.parts[index // 2]
        value = as_portable(part) if part.upgradable else part.raw
        if value and value in seen:
            # win10-x64;win7-x64 collapse into a single win-x64 entry.
            if rendered:
                rendered.pop()
            continue
        seen.add(value)
        rendered.append(value)
    return "".join(rendered)

"""Container image references such as ``mcr.microsoft.com/dotnet/sdk:6.0``.

Version numbers may appear in the repository path (``dotnet/core/sdk3.1``)
and as the leading part of the tag (``6.0-alpine``). Every numeric run is
evaluated on its own and only runs below the channel are replaced; the rest
of the reference is kept as written.
"""

from __future__ import annotations

import re

from packaging.version import Version

from .distros import update_distro
from .models import ParseFailure, TokenKind, UpgradeChannel, VersionToken

KIND = TokenKind.IMAGE_TAG

PREVIEW_LABEL = "preview"
OFFICIAL_REGISTRY = "mcr.microsoft.com"

_IMAGE_RE = re.compile(
    r"^(?P<image>(?:[\w.\-]+:[0-9]+/)?[\w.\-/]+)"
    r"(?::(?P<tag>[\w.\-]+))?"
    r"(?:@(?P<digest>sha256:[0-9a-f]{64}))?$"
)
_RUN_RE = re.compile(r"(?<![0-9.])[1-9][0-9]*\.[0-9]+")
_TAG_VERSION_RE = re.compile(r"^[0-9]+(?:\.[0-9]+){0,3}$")


def is_dotnet_image(image: str) -> bool | None:
    """Return whether *image* is a .NET image, or ``None`` if unknown."""
    parts = image.split("/")
    if len(parts) == 1:
        # Official Docker Hub library image (ubuntu, node, python).
        return False
    if len(parts) == 2 and "." not in image:
        # Docker Hub user namespace.
        return False
    if parts[0].lower() == OFFICIAL_REGISTRY and parts[1].lower() == "dotnet":
        return True
    return None


def _repository_start(image: str) -> int:
    """Offset of the repository path, skipping any registry host."""
    host, sep, _ = image.partition("/")
    if sep and ("." in host or ":" in host or host == "localhost"):
        return len(host) + 1
    return 0


def _split_tag(tag: str) -> tuple[str, str | None]:
    version, sep, suffix = tag.partition("-")
    return version, (suffix if sep else None)


def _tag_version(tag: str | None) -> Version | None:
    if not tag:
        return None
    version, _ = _split_tag(tag)
    if _TAG_VERSION_RE.match(version) is None:
        return None
    return Version(version)


def parse_image(text: str) -> VersionToken | ParseFailure:
    match = _IMAGE_RE.match(text)
    if match is None:
        return ParseFailure(text, KIND, "not a container image reference")

    image = match["image"]
    tag = match["tag"]
    start = _repository_start(image)
    versions = [Version(run) for run in _RUN_RE.findall(image[start:])]
    tag_version = _tag_version(tag)
    if tag_version is not None:
        versions.append(tag_version)
    if not versions:
        return ParseFailure(text, KIND, "no version in image reference")

    lowest = min(versions)
    release = lowest.release + (0, 0)
    return VersionToken(
        raw=text,
        kind=KIND,
        major=release[0],
        minor=release[1],
        patch=release[2] if len(release) > 2 else 0,
        precision=len(tag_version.release) if tag_version is not None else 0,
        prefix=image,
        suffix=tag or "",
        digest=match["digest"],
        upgradable=is_dotnet_image(image) is not False,
    )


def is_at_least(token: VersionToken, channel: UpgradeChannel) -> bool:
    if not token.upgradable:
        return True
    return token.numeric >= (channel.major, channel.minor, 0)


def _upgrade_runs(image: str, channel: UpgradeChannel) -> str:
    start = _repository_start(image)
    target = Version(str(channel))

    def replace(match: re.Match[str]) -> str:
        return str(channel) if Version(match.group(0)) < target else match.group(0)

    return image[:start] + _RUN_RE.sub(replace, image[start:])


def upgrade_tag(tag: str, channel: UpgradeChannel) -> str:
    """Return *tag* moved to *channel*, keeping its variant suffix."""
    version = _tag_version(tag)
    if version is None or version >= Version(str(channel)):
        return tag

    _, suffix = _split_tag(tag)
    updated = str(channel)
    if not suffix:
        return f"{updated}-{PREVIEW_LABEL}" if channel.is_preview else updated

    if channel.is_preview:
        if not suffix.startswith(PREVIEW_LABEL):
            updated = f"{updated}-{PREVIEW_LABEL}"
    elif suffix.startswith(PREVIEW_LABEL):
        suffix = suffix[len(PREVIEW_LABEL) :].lstrip("-")

    if suffix:
        updated = f"{updated}-{update_distro(channel.major, suffix)}"
    return updated


def format_upgraded(token: VersionToken, channel: UpgradeChannel) -> str:
    """Format the upgraded reference.

    A stale digest is dropped; callers that can reach the registry pin the
    new tag again.
    """
    if is_at_least(token, channel):
        return token.raw

    image = _upgrade_runs(token.prefix, channel)
    if not token.suffix:
        return image
    return f"{image}:{upgrade_tag(token.suffix, channel)}"

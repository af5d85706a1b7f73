"""Value types shared by every version grammar."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, IntEnum, StrEnum

import semantic_version


class TokenKind(StrEnum):
    """Grammars a version token can be parsed with."""

    FRAMEWORK_MONIKER = "framework-moniker"
    REGISTRY_SEMVER = "registry-semver"
    RUNTIME_IDENTIFIER = "runtime-identifier"
    MANAGED_RUNTIME = "managed-runtime-string"
    FLOATING_CHANNEL = "floating-channel-expression"
    IMAGE_TAG = "image-tag"
    CONTAINER_PORT = "container-port"
    VISUAL_STUDIO_COMPONENT = "visual-studio-component"


class ReleaseType(StrEnum):
    LTS = "lts"
    STS = "sts"
    PREVIEW = "preview"


class SupportPhase(IntEnum):
    """Support lifecycle of a release channel, in lifecycle order."""

    PREVIEW = 0
    GO_LIVE = 1
    ACTIVE = 2
    MAINTENANCE = 3
    EOL = 4

    @classmethod
    def from_name(cls, name: str) -> "SupportPhase":
        normalized = name.strip().lower().replace("-", "_")
        for phase in cls:
            if phase.name.lower() == normalized:
                return phase
        raise ValueError(f"Unknown support phase: {name}")


class Ordering(Enum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


@dataclass(frozen=True, slots=True)
class VersionToken:
    """A version value parsed from a span of document text.

    ``major``/``minor``/``patch`` hold the value used for ordering. For
    composite tokens (moniker and RID lists, multi-line floating lists)
    ``parts`` holds the component tokens in source order and ``separator``
    the text found between them. ``prefix`` and ``suffix`` carry the opaque
    text around the numeric part (moniker name, RID OS and architecture,
    image name and tag suffix) so a token can be formatted back exactly.
    """

    raw: str
    kind: TokenKind
    major: int = 0
    minor: int = 0
    patch: int = 0
    prerelease: tuple[str, ...] = ()
    floating: bool = False
    precision: int = 2
    band: int | None = None
    upgradable: bool = True
    parts: tuple["VersionToken", ...] = ()
    separator: str = ""
    prefix: str = ""
    suffix: str = ""
    digest: str | None = None

    @property
    def is_composite(self) -> bool:
        return bool(self.parts)

    @property
    def numeric(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """Result of parsing text that is not a version of the requested kind."""

    raw: str
    kind: TokenKind
    reason: str

    def __bool__(self) -> bool:
        return False


_CHANNEL_RE = re.compile(r"^(?P<major>[1-9][0-9]*)\.(?P<minor>[0-9]+)$")


@dataclass(frozen=True, slots=True)
class UpgradeChannel:
    """The release line a run upgrades to. Supplied once per run."""

    major: int
    minor: int
    release_type: ReleaseType
    support_phase: SupportPhase
    sdk_version: semantic_version.Version

    @classmethod
    def parse(
        cls,
        channel: str,
        sdk_version: str,
        release_type: ReleaseType | str = ReleaseType.LTS,
        support_phase: SupportPhase | str = SupportPhase.ACTIVE,
    ) -> "UpgradeChannel":
        """Build a channel from its textual parts.

        Raises:
            ValueError: If the channel or SDK version is malformed, or the
                SDK version does not belong to the channel.
        """
        match = _CHANNEL_RE.match(channel.strip())
        if match is None:
            raise ValueError(f"Invalid channel '{channel}', expected MAJOR.MINOR")
        sdk = semantic_version.Version(sdk_version.strip())
        major, minor = int(match["major"]), int(match["minor"])
        if (sdk.major, sdk.minor) != (major, minor):
            raise ValueError(
                f"SDK version {sdk} does not belong to channel {major}.{minor}"
            )
        if isinstance(support_phase, str):
            support_phase = SupportPhase.from_name(support_phase)
        return cls(
            major=major,
            minor=minor,
            release_type=ReleaseType(release_type),
            support_phase=support_phase,
            sdk_version=sdk,
        )

    @property
    def version(self) -> tuple[int, int]:
        return (self.major, self.minor)

    @property
    def feature_band(self) -> int:
        """SDK patch number with its last two digits zeroed."""
        return self.sdk_version.patch // 100 * 100

    @property
    def moniker(self) -> str:
        return f"net{self.major}.{self.minor}"

    @property
    def managed_runtime(self) -> str:
        return f"dotnet{self.major}"

    @property
    def is_preview(self) -> bool:
        return self.support_phase == SupportPhase.PREVIEW

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"

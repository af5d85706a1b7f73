"""Linux distribution suffixes found in .NET container image tags."""

from __future__ import annotations

from dataclasses import dataclass

UBUNTU_CODE_NAMES = ("focal", "jammy", "noble")

_ALPINE3 = "alpine3"
_MARINER = "cbl-mariner"
_DEBIAN_SLIM = "-slim"


@dataclass(frozen=True, slots=True)
class SupportedDistros:
    """Distro versions published for one .NET major version."""

    debian: tuple[str, ...]
    ubuntu: tuple[str, ...]
    alpine: tuple[str, ...]
    replace_mariner: bool


_DOTNET8 = SupportedDistros(
    debian=("bookworm",),
    ubuntu=("jammy", "noble"),
    alpine=("19", "20"),
    replace_mariner=False,
)

# Latest known images as of .NET 9.
_LATEST = SupportedDistros(
    debian=("bookworm",),
    ubuntu=("noble",),
    alpine=("20",),
    replace_mariner=True,
)


def supported_distros(major: int) -> SupportedDistros:
    return _DOTNET8 if major == 8 else _LATEST


def _pin(distro: str, index: int, candidates: tuple[str, ...]) -> str:
    name, rest = distro[:index], distro[index:]
    if name in candidates:
        return distro
    return f"{candidates[0]}{rest}"


def update_distro(major: int, distro: str) -> str:
    """Move a tag suffix such as ``bullseye-slim`` to a supported distro.

    Suffixes that name no known distro are returned unchanged.
    """
    supported = supported_distros(major)

    index = distro.find(_DEBIAN_SLIM)
    if index > -1:
        return _pin(distro, index, supported.debian)

    if distro.startswith(_ALPINE3) and len(distro) > len(_ALPINE3) + 1 and distro[len(_ALPINE3)] == ".":
        version = distro[len(_ALPINE3) + 1 :]
        if len(version) == 2 or (len(version) > 3 and version[2] == "-"):
            return f"{_ALPINE3}.{_pin(version, 2, supported.alpine)}"
        return distro

    for code_name in UBUNTU_CODE_NAMES:
        if distro.startswith(code_name):
            return _pin(distro, len(code_name), supported.ubuntu)

    if supported.replace_mariner and distro.startswith(_MARINER):
        rest = distro[len(_MARINER) :]
        if rest.startswith("2.0"):
            rest = rest[3:]
        return f"azurelinux3.0{rest}"

    return distro

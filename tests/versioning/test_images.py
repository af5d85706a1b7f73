"""Tests for container image references."""

from __future__ import annotations

import pytest

from dotnet_bumper.versioning import (
    ParseFailure,
    TokenKind,
    UpgradeChannel,
    format_upgraded,
    is_at_least,
    parse,
)
from dotnet_bumper.versioning.distros import update_distro
from dotnet_bumper.versioning.images import is_dotnet_image, upgrade_tag

KIND = TokenKind.IMAGE_TAG
DIGEST = "sha256:" + "a" * 64


class TestParseImage:
    def test_parses_tag_and_digest(self) -> None:
        token = parse(f"mcr.microsoft.com/dotnet/sdk:6.0@{DIGEST}", KIND)
        assert not isinstance(token, ParseFailure)
        assert token.prefix == "mcr.microsoft.com/dotnet/sdk"
        assert token.suffix == "6.0"
        assert token.digest == DIGEST
        assert (token.major, token.minor) == (6, 0)

    def test_version_in_repository_path(self) -> None:
        token = parse("mcr.microsoft.com/dotnet/core/sdk3.1", KIND)
        assert (token.major, token.minor) == (3, 1)

    def test_registry_port_is_not_a_version(self) -> None:
        token = parse("localhost:5000/dotnet/aspnet:7.0", KIND)
        assert (token.major, token.minor) == (7, 0)

    @pytest.mark.parametrize("text", ["base", "mcr.microsoft.com/dotnet/sdk:latest", "build-env"])
    def test_references_without_versions_fail(self, text: str) -> None:
        assert isinstance(parse(text, KIND), ParseFailure)

    @pytest.mark.parametrize(
        ("image", "expected"),
        [
            ("ubuntu", False),
            ("someone/dotnet", False),
            ("mcr.microsoft.com/dotnet/sdk", True),
            ("mcr.example/dotnet/sdk", None),
        ],
    )
    def test_is_dotnet_image(self, image: str, expected) -> None:
        assert is_dotnet_image(image) is expected


class TestUpgradeImage:
    def test_numeric_run_replaced_and_variant_kept(self, channel) -> None:
        token = parse("mcr.example/dotnet/sdk:6.0-alpine", KIND)
        assert format_upgraded(token, channel) == "mcr.example/dotnet/sdk:8.0-alpine"

    def test_official_image(self, channel) -> None:
        token = parse("mcr.microsoft.com/dotnet/aspnet:6.0", KIND)
        assert format_upgraded(token, channel) == "mcr.microsoft.com/dotnet/aspnet:8.0"

    def test_digest_is_dropped(self, channel) -> None:
        token = parse(f"mcr.microsoft.com/dotnet/sdk:6.0@{DIGEST}", KIND)
        assert format_upgraded(token, channel) == "mcr.microsoft.com/dotnet/sdk:8.0"

    @pytest.mark.parametrize("text", ["ubuntu:20.04", "node:16.0", "someone/app:1.0"])
    def test_other_images_are_unchanged(self, text: str, channel) -> None:
        token = parse(text, KIND)
        assert is_at_least(token, channel)
        assert format_upgraded(token, channel) == text

    def test_current_image_is_unchanged(self, channel) -> None:
        text = f"mcr.microsoft.com/dotnet/sdk:8.0@{DIGEST}"
        assert format_upgraded(parse(text, KIND), channel) == text

    def test_preview_label_added_for_preview_channel(self) -> None:
        preview = UpgradeChannel.parse(
            "9.0", "9.0.100-preview.7", release_type="preview", support_phase="preview"
        )
        assert upgrade_tag("8.0-jammy", preview) == "9.0-preview-noble"

    def test_preview_label_removed_for_release_channel(self, channel) -> None:
        assert upgrade_tag("8.0-preview-alpine", channel) == "8.0-preview-alpine"
        assert upgrade_tag("7.0-preview-alpine", channel) == "8.0-alpine"


class TestUpdateDistro:
    @pytest.mark.parametrize(
        ("major", "distro", "expected"),
        [
            (8, "bullseye-slim", "bookworm-slim"),
            (8, "alpine3.16", "alpine3.19"),
            (8, "alpine3.20", "alpine3.20"),
            (8, "focal", "jammy"),
            (8, "jammy-chiseled", "jammy-chiseled"),
            (8, "cbl-mariner2.0", "cbl-mariner2.0"),
            (9, "cbl-mariner2.0-distroless", "azurelinux3.0-distroless"),
            (9, "jammy", "noble"),
            (8, "windowsservercore-ltsc2022", "windowsservercore-ltsc2022"),
        ],
    )
    def test_update_distro(self, major: int, distro: str, expected: str) -> None:
        assert update_distro(major, distro) == expected

"""Tests for runtime identifier portability."""

from __future__ import annotations

import pytest

from dotnet_bumper.versioning import (
    ParseFailure,
    TokenKind,
    format_upgraded,
    is_at_least,
    parse,
)

KIND = TokenKind.RUNTIME_IDENTIFIER


class TestParseRid:
    @pytest.mark.parametrize(
        ("text", "os_name", "suffix"),
        [
            ("win10-x64", "win10", "-x64"),
            ("osx.12-arm64", "osx", "-arm64"),
            ("ubuntu.22.04-x64", "ubuntu", "-x64"),
            ("linux-musl-arm", "linux-musl", "-arm"),
            ("win-x86-aot", "win", "-x86-aot"),
        ],
    )
    def test_parses_os_and_architecture(self, text: str, os_name: str, suffix: str) -> None:
        token = parse(text, KIND)
        assert not isinstance(token, ParseFailure)
        assert token.prefix == os_name
        assert token.suffix == suffix

    @pytest.mark.parametrize("text", ["x64", "win10", "plan9-x64", "Win10-x64", "net8.0"])
    def test_rejects_unknown_identifiers(self, text: str) -> None:
        assert isinstance(parse(text, KIND), ParseFailure)

    def test_list_allows_trailing_separator(self) -> None:
        token = parse("win10-x64;osx-arm64;", KIND)
        assert not isinstance(token, ParseFailure)
        assert [part.raw for part in token.parts] == ["win10-x64", "osx-arm64", ""]


class TestPortableRid:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("win10-x64", "win-x64"),
            ("win7-x86", "win-x86"),
            ("osx.12-arm64", "osx-arm64"),
            ("ubuntu.22.04-x64", "linux-x64"),
            ("alpine.3.18-x64", "linux-musl-x64"),
            ("rhel.8-x64", "linux-x64"),
        ],
    )
    def test_normalizes_to_portable(self, text: str, expected: str, channel) -> None:
        assert format_upgraded(parse(text, KIND), channel) == expected

    @pytest.mark.parametrize("text", ["linux-x64", "win-arm64", "osx-x64", "linux-musl-x64", "ios-arm64"])
    def test_portable_and_mobile_are_unchanged(self, text: str, channel) -> None:
        token = parse(text, KIND)
        assert is_at_least(token, channel)
        assert format_upgraded(token, channel) == text

    def test_list_collapses_duplicates(self, channel) -> None:
        token = parse("win10-x64;win7-x64;osx.11-arm64", KIND)
        assert format_upgraded(token, channel) == "win-x64;osx-arm64"

    def test_list_keeps_trailing_separator(self, channel) -> None:
        token = parse("win10-x64;linux-x64;", KIND)
        assert format_upgraded(token, channel) == "win-x64;linux-x64;"

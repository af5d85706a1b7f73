"""Tests for selecting version tokens in parsed documents."""

from __future__ import annotations

from pathlib import Path

import pytest

from dotnet_bumper.documents import (
    FileMetadata,
    JsonLocator,
    ScalarSite,
    SourceSpan,
    TokenSelector,
    XmlLocator,
    YamlLocator,
    find_candidates,
    parse_text,
)
from dotnet_bumper.documents.candidates import Candidate, resolve_overlaps
from dotnet_bumper.documents.source import DocumentParseFailure
from dotnet_bumper.errors import AmbiguousCandidateError
from dotnet_bumper.versioning import TokenKind, parse


def document(text: str, locator) -> object:
    result = parse_text(Path("file"), text, FileMetadata(), locator)
    assert not isinstance(result, DocumentParseFailure)
    return result


def any_site(site: ScalarSite) -> bool:
    return True


class TestFindCandidates:
    def test_values_of_other_kinds_are_skipped(self) -> None:
        doc = document('{"a": "net6.0", "b": "hello", "c": "6.0.100"}', JsonLocator())
        selector = TokenSelector("any", TokenKind.FRAMEWORK_MONIKER, any_site)
        assert [c.token.raw for c in find_candidates(doc, [selector])] == ["net6.0"]

    def test_irrelevant_document_yields_nothing(self) -> None:
        doc = document("name: build\non: push\n", YamlLocator())
        selector = TokenSelector("any", TokenKind.FLOATING_CHANNEL, lambda s: s.key == "dotnet-version")
        assert find_candidates(doc, [selector]) == []

    def test_path_segments(self) -> None:
        text = "<Project><PropertyGroup><PublishDir>bin/Release/net6.0/win10-x64/</PublishDir></PropertyGroup></Project>"
        doc = document(text, XmlLocator())
        selector = TokenSelector("path", TokenKind.FRAMEWORK_MONIKER, any_site, path_segments=True)
        (candidate,) = find_candidates(doc, [selector])
        assert candidate.span.slice(text) == "net6.0"

    def test_candidates_are_sorted_by_position(self) -> None:
        text = "b: dotnet6\na: dotnet7\n"
        doc = document(text, YamlLocator())
        selector = TokenSelector("runtime", TokenKind.MANAGED_RUNTIME, any_site)
        spans = [c.span.start for c in find_candidates(doc, [selector])]
        assert spans == sorted(spans)


class TestResolveOverlaps:
    def _candidate(self, name: str, specificity: int, start: int, end: int) -> Candidate:
        token = parse("net6.0", TokenKind.FRAMEWORK_MONIKER)
        site = ScalarSite(("a",), "net6.0", "net6.0", SourceSpan(start, end))
        selector = TokenSelector(name, TokenKind.FRAMEWORK_MONIKER, any_site, specificity)
        return Candidate(token, SourceSpan(start, end), selector, site)

    def test_most_specific_selector_wins(self) -> None:
        general = self._candidate("general", 0, 0, 6)
        specific = self._candidate("specific", 10, 0, 6)
        assert resolve_overlaps([general, specific]) == [specific]

    def test_equal_specificity_is_ambiguous(self) -> None:
        first = self._candidate("first", 1, 0, 6)
        second = self._candidate("second", 1, 3, 9)
        with pytest.raises(AmbiguousCandidateError, match="first"):
            resolve_overlaps([first, second], "app.csproj")

    def test_disjoint_candidates_are_kept(self) -> None:
        first = self._candidate("first", 1, 0, 6)
        second = self._candidate("second", 1, 6, 12)
        assert resolve_overlaps([second, first]) == [first, second]

"""Finding version tokens at meaningful places in a document."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass

from dotnet_bumper.errors import AmbiguousCandidateError
from dotnet_bumper.versioning import ParseFailure, TokenKind, VersionToken, parse

from .locator import ScalarSite
from .source import SourceDocument
from .spans import SourceSpan

logger = logging.getLogger(__name__)

_PATH_SEPARATOR_RE = re.compile(r"[\\/]")


@dataclass(frozen=True)
class TokenSelector:
    """Where in a document tokens of one kind are meaningful.

    ``match`` decides whether a scalar site is relevant. With
    ``path_segments`` set, only values containing a path separator are
    considered, and each path segment is parsed on its own. When two
    selectors claim overlapping text, the higher ``specificity`` wins.
    """

    name: str
    kind: TokenKind
    match: Callable[[ScalarSite], bool]
    specificity: int = 0
    path_segments: bool = False


@dataclass(frozen=True, slots=True)
class Candidate:
    token: VersionToken
    span: SourceSpan
    selector: TokenSelector
    site: ScalarSite


def _segments(site: ScalarSite) -> Iterator[tuple[str, SourceSpan]]:
    if _PATH_SEPARATOR_RE.search(site.raw) is None:
        return
    offset = site.span.start
    for piece in _PATH_SEPARATOR_RE.split(site.raw):
        if piece:
            yield piece, SourceSpan(offset, offset + len(piece))
        offset += len(piece) + 1


def _site_tokens(
    site: ScalarSite, selector: TokenSelector
) -> Iterator[tuple[VersionToken, SourceSpan]]:
    pieces = _segments(site) if selector.path_segments else [(site.raw, site.span)]
    for text, span in pieces:
        token = parse(text, selector.kind)
        if isinstance(token, ParseFailure):
            continue
        yield token, span


def resolve_overlaps(candidates: Iterable[Candidate], source: str = "<document>") -> list[Candidate]:
    """Keep the most specific candidate wherever spans overlap.

    Raises:
        AmbiguousCandidateError: If overlapping candidates come from
            selectors with the same specificity.
    """
    kept: list[Candidate] = []
    ordered = sorted(candidates, key=lambda c: (-c.selector.specificity, c.span.start))
    for candidate in ordered:
        clash = next((k for k in kept if k.span.overlaps(candidate.span)), None)
        if clash is None:
            kept.append(candidate)
            continue
        if clash.selector.specificity == candidate.selector.specificity:
            raise AmbiguousCandidateError(source, clash.selector.name, candidate.selector.name)
        logger.debug(
            "Selector %s yields to %s at %s in %s",
            candidate.selector.name,
            clash.selector.name,
            candidate.span,
            source,
        )
    return sorted(kept, key=lambda c: c.span.start)


def find_candidates(
    document: SourceDocument, selectors: Sequence[TokenSelector]
) -> list[Candidate]:
    """Return version tokens selected in *document*, sorted by position.

    Sites no selector matches and values that do not parse as the
    selector's kind are skipped, so an irrelevant document yields nothing.
    """
    found: list[Candidate] = []
    for site in document.scalars():
        for selector in selectors:
            if not selector.match(site):
                continue
            for token, span in _site_tokens(site, selector):
                found.append(Candidate(token, span, selector, site))
    return resolve_overlaps(found, str(document.path))

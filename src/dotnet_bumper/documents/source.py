"""Loading a file into a parsed, position-aware document."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .locator import DocumentLocator, DocumentSyntaxError, ScalarSite
from .metadata import FileMetadata, read_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """One file as read for a single upgrade pass. Never cached across files."""

    path: Path
    text: str
    metadata: FileMetadata
    tree: Any
    locator: DocumentLocator
    sites: tuple[ScalarSite, ...] = ()

    def scalars(self) -> list[ScalarSite]:
        return list(self.sites)


@dataclass(frozen=True, slots=True)
class DocumentParseFailure:
    """A file that could not be read or parsed."""

    path: Path
    reason: str

    def __bool__(self) -> bool:
        return False


def parse_text(
    path: Path, text: str, metadata: FileMetadata, locator: DocumentLocator
) -> SourceDocument | DocumentParseFailure:
    """Parse *text* and collect its scalar sites.

    Syntax errors and documents nested too deeply to walk are returned as a
    ``DocumentParseFailure``.
    """
    try:
        tree = locator.parse(text)
        sites = tuple(locator.iter_scalars(tree))
    except DocumentSyntaxError as exc:
        logger.debug("Failed to parse %s as %s: %s", path, locator.format, exc)
        return DocumentParseFailure(path, f"Invalid {locator.format}: {exc}")
    except RecursionError:
        logger.debug("Failed to parse %s as %s: nesting too deep", path, locator.format)
        return DocumentParseFailure(path, f"Invalid {locator.format}: nesting too deep")
    return SourceDocument(path, text, metadata, tree, locator, sites)


def load_document(path: Path, locator: DocumentLocator) -> SourceDocument | DocumentParseFailure:
    """Read and parse *path*.

    Read and syntax errors are returned as a ``DocumentParseFailure`` so the
    caller can skip the file and move on.
    """
    try:
        text, metadata = read_document(path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Failed to read %s: %s", path, exc)
        return DocumentParseFailure(path, f"Unable to read file: {exc}")
    return parse_text(path, text, metadata, locator)

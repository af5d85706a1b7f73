"""Splice edits into document text and write documents back atomically."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from dotnet_bumper.errors import EditOrderError

from .metadata import FileMetadata
from .spans import EditSpan

logger = logging.getLogger(__name__)


def apply_edits(text: str, edits: Sequence[EditSpan]) -> str:
    """Return *text* with every edit applied in a single pass.

    Edits must be sorted by start offset and must not overlap. Everything
    outside the edited spans is copied verbatim, so line endings and
    comments elsewhere in the document are untouched.

    Raises:
        EditOrderError: If the edits are unsorted, overlap, or fall outside
            the text.
    """
    if not edits:
        return text

    chunks: list[str] = []
    cursor = 0
    for edit in edits:
        span = edit.span
        if span.start < cursor:
            raise EditOrderError(
                f"Edit at [{span.start}, {span.end}) starts before offset {cursor}"
            )
        if span.end > len(text):
            raise EditOrderError(
                f"Edit at [{span.start}, {span.end}) is past the end of the text ({len(text)})"
            )
        chunks.append(text[cursor : span.start])
        chunks.append(edit.replacement)
        cursor = span.end
    chunks.append(text[cursor:])
    return "".join(chunks)


def write_document(path: Path, text: str, metadata: FileMetadata) -> None:
    """Write *text* to *path* using the encoding and BOM it was read with.

    The content is encoded in memory and written to a temporary file in the
    same directory, which then replaces *path*. A failure at any point
    leaves the original file in place.

    Raises:
        OSError: If the file cannot be written.
        UnicodeEncodeError: If *text* cannot be represented in the
            original encoding.
    """
    data = metadata.encode(text)

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        if path.exists():
            os.chmod(tmp_path, path.stat().st_mode & 0o7777)
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    logger.debug("Wrote %d bytes to %s", len(data), path)

"""Encoding, byte-order mark and newline detection for text files."""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass
from pathlib import Path

# UTF-32 LE must be tested before UTF-16 LE, which shares its prefix.
_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)

_NEWLINE_RE = re.compile(r"\r\n|\n|\r")

DEFAULT_ENCODING = "utf-8"
DEFAULT_NEWLINE = "\n"


@dataclass(frozen=True, slots=True)
class FileMetadata:
    """How a file was stored on disk, captured when it is read."""

    encoding: str = DEFAULT_ENCODING
    bom: bytes = b""
    newline: str = DEFAULT_NEWLINE

    @property
    def has_bom(self) -> bool:
        return bool(self.bom)

    def encode(self, text: str) -> bytes:
        return self.bom + text.encode(self.encoding)


def detect_newline(text: str) -> str:
    """Return the first line ending used in *text*."""
    match = _NEWLINE_RE.search(text)
    return match.group(0) if match else DEFAULT_NEWLINE


def decode(data: bytes) -> tuple[str, FileMetadata]:
    """Decode *data* without translating line endings.

    Raises:
        UnicodeDecodeError: If the bytes are not valid for the detected
            encoding.
    """
    for bom, encoding in _BOMS:
        if data.startswith(bom):
            text = data[len(bom) :].decode(encoding)
            return text, FileMetadata(encoding, bom, detect_newline(text))

    text = data.decode(DEFAULT_ENCODING)
    return text, FileMetadata(DEFAULT_ENCODING, b"", detect_newline(text))


def read_document(path: Path) -> tuple[str, FileMetadata]:
    """Read *path* and return its text with the metadata needed to write it back."""
    return decode(path.read_bytes())

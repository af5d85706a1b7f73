"""The contract shared by every per-format document locator."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from .spans import SourceSpan

PathElement = str | int


class DocumentSyntaxError(ValueError):
    """Raised by a locator when document text cannot be parsed."""

    def __init__(self, message: str, offset: int | None = None):
        self.offset = offset
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class ScalarSite:
    """A scalar value in a parsed document and where its text lives.

    ``raw`` is the exact source text covered by ``span``; it differs from
    ``value`` only for block scalars, whose source keeps its indentation.
    ``scopes`` holds the scalar members of every mapping enclosing the
    value, outermost first, so the last entry is the value's own mapping.
    ``lines`` holds one span per non-blank source line of a multi-line
    scalar and is empty otherwise.
    """

    path: tuple[PathElement, ...]
    value: str
    raw: str
    span: SourceSpan
    scopes: tuple[Mapping[str, str], ...] = ()
    lines: tuple[SourceSpan, ...] = field(default=())

    @property
    def key(self) -> str | None:
        """Name of the member holding this value, if it is a mapping member."""
        if self.path and isinstance(self.path[-1], str):
            return self.path[-1]
        return None

    @property
    def parent_key(self) -> str | None:
        for element in reversed(self.path[:-1]):
            if isinstance(element, str):
                return element
        return None

    @property
    def siblings(self) -> Mapping[str, str]:
        return self.scopes[-1] if self.scopes else {}

    @property
    def root(self) -> Mapping[str, str]:
        return self.scopes[0] if self.scopes else {}

    @property
    def is_multiline(self) -> bool:
        return len(self.lines) > 1


class DocumentLocator(Protocol):
    """Parses one document format and yields its scalar sites.

    Implementations never mutate the tree, so one parsed tree can be walked
    any number of times.
    """

    format: str

    def parse(self, text: str) -> Any:
        """Parse *text*, raising ``DocumentSyntaxError`` if it is malformed."""
        ...

    def iter_scalars(self, tree: Any) -> Iterator[ScalarSite]:
        """Yield every scalar value in document order."""
        ...

"""XML locator for MSBuild project and property files.

Only the text of leaf elements is exposed, and only when the source text
matches the decoded value, so entity references, CDATA sections and
comments inside an element are never rewritten.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from xml.parsers import expat

from .locator import DocumentSyntaxError, PathElement, ScalarSite
from .spans import SourceSpan


@dataclass(slots=True)
class XmlElement:
    name: str
    attributes: dict[str, str]
    start: int
    content_start: int = -1
    content_end: int = -1
    text: list[str] = field(default_factory=list)
    children: list["XmlElement"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True, slots=True)
class XmlTree:
    text: str
    root: XmlElement


def _tag_end(text: str, start: int) -> int:
    """Index just past the ``>`` closing the tag that opens at *start*."""
    quote = ""
    for index in range(start, len(text)):
        char = text[index]
        if quote:
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char == ">":
            return index + 1
    return len(text)


class _OffsetMap:
    """Converts UTF-8 byte offsets reported by expat into code point offsets."""

    def __init__(self, text: str, data: bytes):
        self._ascii = len(text) == len(data)
        self._data = data

    def __call__(self, byte_offset: int) -> int:
        if self._ascii:
            return byte_offset
        return len(self._data[:byte_offset].decode("utf-8"))


class XmlLocator:
    """Locator for ``*.csproj``, ``*.props`` and publish profiles."""

    format = "xml"

    def parse(self, text: str) -> XmlTree:
        data = text.encode("utf-8")
        offsets = _OffsetMap(text, data)
        # The text is already decoded; any encoding declaration is overridden.
        parser = expat.ParserCreate(encoding="UTF-8")
        stack: list[XmlElement] = []
        roots: list[XmlElement] = []

        def start_element(name: str, attributes: dict[str, str]) -> None:
            start = offsets(parser.CurrentByteIndex)
            element = XmlElement(name, dict(attributes), start)
            element.content_start = _tag_end(text, start)
            if stack:
                stack[-1].children.append(element)
            else:
                roots.append(element)
            stack.append(element)

        def end_element(name: str) -> None:
            element = stack.pop()
            end = offsets(parser.CurrentByteIndex)
            # Empty-element tags report their end at the start of the tag.
            element.content_end = max(end, element.content_start)

        def character_data(data: str) -> None:
            if stack:
                stack[-1].text.append(data)

        parser.StartElementHandler = start_element
        parser.EndElementHandler = end_element
        parser.CharacterDataHandler = character_data

        try:
            parser.Parse(data, True)
        except expat.ExpatError as exc:
            raise DocumentSyntaxError(
                f"{expat.ErrorString(exc.code)} at line {exc.lineno}, column {exc.offset}"
            ) from exc

        return XmlTree(text, roots[0])

    def iter_scalars(self, tree: XmlTree) -> Iterator[ScalarSite]:
        yield from self._walk(tree.text, tree.root, (), ())

    def _walk(
        self,
        text: str,
        element: XmlElement,
        path: tuple[PathElement, ...],
        scopes: tuple[dict[str, str], ...],
    ) -> Iterator[ScalarSite]:
        path = path + (element.name,)
        scopes = scopes + (element.attributes,)

        if not element.is_leaf:
            for child in element.children:
                yield from self._walk(text, child, path, scopes)
            return

        if text[element.start : element.content_start].endswith("/>"):
            return

        value = "".join(element.text)
        raw = text[element.content_start : element.content_end]
        # expat reports every line ending as a single LF.
        if raw.replace("\r\n", "\n").replace("\r", "\n") != value:
            return

        stripped = raw.strip()
        if not stripped:
            return
        start = element.content_start + len(raw) - len(raw.lstrip())
        span = SourceSpan(start, start + len(stripped))
        yield ScalarSite(path, value.strip(), stripped, span, scopes)

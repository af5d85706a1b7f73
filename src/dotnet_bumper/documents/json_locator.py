"""Position-aware JSON locator.

The standard library parser discards source positions, so documents are
read with a small recursive-descent reader that records the span of every
string value. Line and block comments and trailing commas, which
``global.json`` and ``launch.json`` commonly contain, are tolerated.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from .locator import DocumentSyntaxError, PathElement, ScalarSite
from .spans import SourceSpan

_WHITESPACE_RE = re.compile(r"[ \t\r\n]*")
_NUMBER_RE = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_LITERALS = {"true": True, "false": False, "null": None}


@dataclass(slots=True)
class JsonNode:
    """A parsed JSON value with the span of its source text."""

    value: Any
    span: SourceSpan
    members: list[tuple[str, "JsonNode"]] = field(default_factory=list)
    items: list["JsonNode"] = field(default_factory=list)
    kind: str = "scalar"

    def get(self, key: str) -> "JsonNode | None":
        for name, node in self.members:
            if name == key:
                return node
        return None


@dataclass(frozen=True, slots=True)
class JsonTree:
    text: str
    root: JsonNode


class _Reader:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, message: str) -> DocumentSyntaxError:
        line = self.text.count("\n", 0, self.pos) + 1
        return DocumentSyntaxError(f"{message} at line {line} (offset {self.pos})", self.pos)

    def skip(self) -> None:
        text = self.text
        while True:
            self.pos = _WHITESPACE_RE.match(text, self.pos).end()
            if text.startswith("//", self.pos):
                newline = text.find("\n", self.pos)
                self.pos = len(text) if newline == -1 else newline + 1
            elif text.startswith("/*", self.pos):
                close = text.find("*/", self.pos + 2)
                if close == -1:
                    raise self.error("Unterminated comment")
                self.pos = close + 2
            else:
                return

    def peek(self) -> str:
        return self.text[self.pos : self.pos + 1]

    def document(self) -> JsonNode:
        self.skip()
        node = self.value()
        self.skip()
        if self.pos != len(self.text):
            raise self.error("Unexpected content after JSON value")
        return node

    def value(self) -> JsonNode:
        char = self.peek()
        if char == "{":
            return self.object()
        if char == "[":
            return self.array()
        if char == '"':
            return self.string()

        start = self.pos
        for literal, value in _LITERALS.items():
            if self.text.startswith(literal, start):
                self.pos += len(literal)
                return JsonNode(value, SourceSpan(start, self.pos))

        match = _NUMBER_RE.match(self.text, start)
        if match is None or not match.group(0):
            raise self.error("Expected a JSON value")
        self.pos = match.end()
        return JsonNode(json.loads(match.group(0)), SourceSpan(start, self.pos))

    def string(self) -> JsonNode:
        start = self.pos
        try:
            value, end = json.decoder.scanstring(self.text, start + 1)
        except json.JSONDecodeError as exc:
            raise self.error(exc.msg) from exc
        self.pos = end
        return JsonNode(value, SourceSpan(start, end), kind="string")

    def object(self) -> JsonNode:
        start = self.pos
        self.pos += 1
        node = JsonNode(None, SourceSpan(start, start), kind="object")
        while True:
            self.skip()
            if self.peek() == "}":
                self.pos += 1
                break
            if self.peek() != '"':
                raise self.error("Expected a property name")
            key = self.string().value
            self.skip()
            if self.peek() != ":":
                raise self.error("Expected ':'")
            self.pos += 1
            self.skip()
            node.members.append((key, self.value()))
            self.skip()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != "}":
                raise self.error("Expected ',' or '}'")
        node.span = SourceSpan(start, self.pos)
        return node

    def array(self) -> JsonNode:
        start = self.pos
        self.pos += 1
        node = JsonNode(None, SourceSpan(start, start), kind="array")
        while True:
            self.skip()
            if self.peek() == "]":
                self.pos += 1
                break
            node.items.append(self.value())
            self.skip()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != "]":
                raise self.error("Expected ',' or ']'")
        node.span = SourceSpan(start, self.pos)
        return node


def parse_json(text: str) -> JsonNode:
    """Parse JSON with comments and return the root node."""
    return _Reader(text).document()


class JsonLocator:
    """Locator for JSON files such as ``global.json`` and ``launch.json``."""

    format = "json"

    def parse(self, text: str) -> JsonTree:
        return JsonTree(text, parse_json(text))

    def iter_scalars(self, tree: JsonTree) -> Iterator[ScalarSite]:
        yield from self._walk(tree.text, tree.root, (), ())

    def _walk(
        self,
        text: str,
        node: JsonNode,
        path: tuple[PathElement, ...],
        scopes: tuple[dict[str, str], ...],
    ) -> Iterator[ScalarSite]:
        if node.kind == "object":
            members = {
                key: child.value for key, child in node.members if child.kind == "string"
            }
            inner = scopes + (members,)
            for key, child in node.members:
                yield from self._walk(text, child, path + (key,), inner)
        elif node.kind == "array":
            for index, item in enumerate(node.items):
                yield from self._walk(text, item, path + (index,), scopes)
        elif node.kind == "string":
            span = SourceSpan(node.span.start + 1, node.span.end - 1)
            raw = span.slice(text)
            # Values containing escape sequences have no exact span.
            if raw == node.value:
                yield ScalarSite(path, node.value, raw, span, scopes)

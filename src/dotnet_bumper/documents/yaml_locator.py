"""YAML locator built on the ruamel.yaml composer.

Composed nodes keep the character index of their start and end marks, which
gives exact spans for plain, quoted and block scalars in both block and flow
style. Multi-document streams are walked document by document.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from ruamel.yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from .locator import DocumentSyntaxError, PathElement, ScalarSite
from .spans import SourceSpan

_LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")
_LINE_RE = re.compile(r"[^\r\n]+")

_BLOCK_STYLES = ("|", ">")
_QUOTED_STYLES = ("'", '"')


@dataclass(frozen=True, slots=True)
class YamlTree:
    text: str
    documents: tuple[Node, ...]


def _block_lines(text: str, start: int, end: int) -> list[SourceSpan]:
    """Spans of the non-blank content lines of a block scalar."""
    header = _LINE_BREAK_RE.search(text, start, end)
    if header is None:
        return []

    lines: list[SourceSpan] = []
    for match in _LINE_RE.finditer(text, header.end(), end):
        content = match.group(0)
        stripped = content.strip(" \t")
        if not stripped:
            continue
        line_start = match.start() + len(content) - len(content.lstrip(" \t"))
        lines.append(SourceSpan(line_start, line_start + len(stripped)))
    return lines


class YamlLocator:
    """Locator for YAML documents such as workflows and SAM templates."""

    format = "yaml"

    def parse(self, text: str) -> YamlTree:
        yaml = YAML()
        try:
            documents = tuple(yaml.compose_all(text))
        except YAMLError as exc:
            mark = getattr(exc, "problem_mark", None)
            raise DocumentSyntaxError(str(exc), mark.index if mark else None) from exc
        return YamlTree(text, tuple(d for d in documents if d is not None))

    def iter_scalars(self, tree: YamlTree) -> Iterator[ScalarSite]:
        for document in tree.documents:
            yield from self._walk(tree.text, document, (), (), set())

    def _walk(
        self,
        text: str,
        node: Node,
        path: tuple[PathElement, ...],
        scopes: tuple[dict[str, str], ...],
        seen: set[int],
    ) -> Iterator[ScalarSite]:
        # Aliases compose to the node they refer to; visit it once.
        if id(node) in seen:
            return
        seen.add(id(node))

        if isinstance(node, MappingNode):
            members = {
                key.value: value.value
                for key, value in node.value
                if isinstance(key, ScalarNode) and isinstance(value, ScalarNode)
            }
            inner = scopes + (members,)
            for key, value in node.value:
                if isinstance(key, ScalarNode):
                    yield from self._walk(text, value, path + (key.value,), inner, seen)
        elif isinstance(node, SequenceNode):
            for index, item in enumerate(node.value):
                yield from self._walk(text, item, path + (index,), scopes, seen)
        elif isinstance(node, ScalarNode):
            site = self._site(text, node, path, scopes)
            if site is not None:
                yield site

    def _site(
        self,
        text: str,
        node: ScalarNode,
        path: tuple[PathElement, ...],
        scopes: tuple[dict[str, str], ...],
    ) -> ScalarSite | None:
        start = node.start_mark.index
        end = node.end_mark.index

        if node.style in _BLOCK_STYLES:
            lines = _block_lines(text, start, end)
            if not lines:
                return None
            span = SourceSpan(lines[0].start, lines[-1].end)
            return ScalarSite(path, node.value, span.slice(text), span, scopes, tuple(lines))

        if node.style in _QUOTED_STYLES:
            span = SourceSpan(start + 1, end - 1)
        else:
            span = SourceSpan(start, end)

        raw = span.slice(text)
        if raw != node.value:
            # Escapes, tags and folded plain scalars have no exact span.
            return None
        return ScalarSite(path, node.value, raw, span, scopes)

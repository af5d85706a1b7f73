"""Line-oriented locator for Dockerfile ``FROM`` and ``EXPOSE`` instructions."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from .locator import DocumentSyntaxError, PathElement, ScalarSite
from .spans import SourceSpan

FROM_RE = re.compile(
    r"^[ \t]*(?i:FROM)[ \t]+"
    r"(?:(?P<platform>--platform=\S+)[ \t]+)?"
    r"(?P<image>[^\s#]+)"
    r"(?:[ \t]+(?P<name>(?i:AS)[ \t]+\S+))?"
    r"[ \t]*$"
)

EXPOSE_RE = re.compile(r"^[ \t]*(?i:EXPOSE)[ \t]+(?P<ports>[^#]*?)[ \t]*$")
PORT_RE = re.compile(r"\S+")


@dataclass(frozen=True, slots=True)
class Instruction:
    """One located value of a ``FROM`` or ``EXPOSE`` instruction."""

    keyword: str
    line: int
    value: str
    span: SourceSpan
    index: int = 0
    platform: str | None = None
    name: str | None = None


@dataclass(frozen=True, slots=True)
class DockerfileTree:
    text: str
    instructions: tuple[Instruction, ...]


class DockerfileLocator:
    """Locator for ``Dockerfile`` and ``*.Dockerfile`` files.

    Each ``FROM`` image is one site at path ``("FROM", line)``; each port of
    an ``EXPOSE`` instruction is a site at ``("EXPOSE", line, index)``.
    """

    format = "dockerfile"

    def parse(self, text: str) -> DockerfileTree:
        if "\x00" in text:
            raise DocumentSyntaxError("Dockerfile contains NUL characters")

        instructions: list[Instruction] = []
        offset = 0
        for number, line in enumerate(text.splitlines(keepends=True)):
            content = line.rstrip("\r\n")
            match = FROM_RE.match(content)
            if match is not None:
                instructions.append(
                    Instruction(
                        keyword="FROM",
                        line=number,
                        value=match["image"],
                        span=SourceSpan(offset + match.start("image"), offset + match.end("image")),
                        platform=match["platform"],
                        name=match["name"],
                    )
                )
            elif (expose := EXPOSE_RE.match(content)) is not None:
                base = offset + expose.start("ports")
                for index, port in enumerate(PORT_RE.finditer(expose["ports"])):
                    instructions.append(
                        Instruction(
                            keyword="EXPOSE",
                            line=number,
                            value=port.group(),
                            span=SourceSpan(base + port.start(), base + port.end()),
                            index=index,
                        )
                    )
            offset += len(line)
        return DockerfileTree(text, tuple(instructions))

    def iter_scalars(self, tree: DockerfileTree) -> Iterator[ScalarSite]:
        for instruction in tree.instructions:
            scope = {"instruction": instruction.keyword}
            if instruction.platform:
                scope["platform"] = instruction.platform
            if instruction.name:
                scope["name"] = instruction.name
            if instruction.keyword == "FROM":
                path: tuple[PathElement, ...] = ("FROM", instruction.line)
            else:
                path = (instruction.keyword, instruction.line, instruction.index)
            yield ScalarSite(
                path=path,
                value=instruction.value,
                raw=instruction.value,
                span=instruction.span,
                scopes=(scope,),
            )

"""Template syntax tree: literal spans, directives and path expressions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union


@dataclass(frozen=True)
class Field:
    """Object key segment."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Index:
    """Zero-based array position segment."""

    position: int

    def __post_init__(self) -> None:
        if self.position < 0:
            raise ValueError(f"Index must be non-negative, got {self.position}")

    def __str__(self) -> str:
        return str(self.position)


Segment = Union[Field, Index]


def format_path(segments: Iterable[Segment]) -> str:
    """Render segments as dotted path text; ``$`` stands for the root."""
    text = ".".join(str(segment) for segment in segments)
    return text or "$"


@dataclass(frozen=True)
class PathExpr:
    segments: tuple[Segment, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("Path expression must have at least one segment")

    def __str__(self) -> str:
        return format_path(self.segments)


@dataclass(frozen=True)
class FormatSpec:
    """Formatting rule name plus its optional argument."""

    name: str
    argument: str | None = None

    def __str__(self) -> str:
        if self.argument is None:
            return self.name
        return f"{self.name}:{self.argument}"


@dataclass(frozen=True)
class Position:
    """Location in template source; ``line`` and ``column`` are 1-based."""

    offset: int
    byte_offset: int
    line: int
    column: int

    @classmethod
    def from_offset(cls, source: str, offset: int) -> Position:
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(
            offset=offset,
            byte_offset=len(source[:offset].encode("utf-8")),
            line=source.count("\n", 0, offset) + 1,
            column=offset - line_start + 1,
        )

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column} (offset {self.offset})"


@dataclass(frozen=True)
class Literal:
    """Verbatim output; ``text`` has escapes already applied."""

    text: str
    start: int
    end: int


@dataclass(frozen=True)
class Directive:
    path: PathExpr
    format_spec: FormatSpec | None
    default: str | None
    start: int
    end: int
    source: str


Node = Union[Literal, Directive]


@dataclass(frozen=True)
class Template:
    """Parsed template. Node spans tile ``source`` in order."""

    source: str
    nodes: tuple[Node, ...]

    @property
    def directives(self) -> list[Directive]:
        return [node for node in self.nodes if isinstance(node, Directive)]

    def position(self, offset: int) -> Position:
        return Position.from_offset(self.source, offset)

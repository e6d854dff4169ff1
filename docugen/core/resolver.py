"""Follow a path expression through a value tree."""

from __future__ import annotations

from ..errors import (
    IndexOutOfBoundsError,
    MissingFieldError,
    NullEncounteredError,
    PathTypeMismatchError,
)
from .nodes import Field, Index, PathExpr
from .values import JsonArray, JsonNull, JsonObject, JsonValue, ValueKind


def resolve(path: PathExpr, root: JsonValue) -> JsonValue:
    """Return the value addressed by ``path``.

    Segments are applied left to right. A terminal null is returned as-is;
    a null met while segments remain raises NullEncounteredError.

    Args:
        path: Path expression from a directive
        root: Document root

    Returns:
        Addressed value

    Raises:
        ResolveError: If a segment does not match the value it is applied to
    """
    current = root
    for depth, segment in enumerate(path.segments):
        consumed = path.segments[:depth]

        if isinstance(current, JsonNull):
            raise NullEncounteredError(consumed)

        if isinstance(segment, Field):
            if not isinstance(current, JsonObject):
                raise PathTypeMismatchError(consumed, ValueKind.OBJECT, current.kind)
            child = current.get(segment.name)
            if child is None:
                raise MissingFieldError(consumed, segment.name)
            current = child
        elif isinstance(segment, Index):
            if not isinstance(current, JsonArray):
                raise PathTypeMismatchError(consumed, ValueKind.ARRAY, current.kind)
            if segment.position >= len(current.items):
                raise IndexOutOfBoundsError(consumed, segment.position, len(current.items))
            current = current.items[segment.position]
        else:
            raise TypeError(f"Unknown path segment: {segment!r}")

    return current

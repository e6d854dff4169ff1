"""Tagged JSON value tree walked by the resolver and formatter."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Mapping, Union


class ValueKind(str, Enum):
    """Shape of a JSON value."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


class _Value:
    kind: ClassVar[ValueKind]

    @property
    def kind_name(self) -> str:
        """Shape name as used in messages, e.g. ``"array"``."""
        return self.kind.value


@dataclass(frozen=True)
class JsonObject(_Value):
    members: Mapping[str, "JsonValue"] = field(default_factory=dict)

    kind: ClassVar[ValueKind] = ValueKind.OBJECT

    def get(self, key: str) -> "JsonValue | None":
        return self.members.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.members

    def __len__(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class JsonArray(_Value):
    items: tuple["JsonValue", ...] = ()

    kind: ClassVar[ValueKind] = ValueKind.ARRAY

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class JsonString(_Value):
    value: str

    kind: ClassVar[ValueKind] = ValueKind.STRING


@dataclass(frozen=True)
class JsonNumber(_Value):
    value: int | float

    kind: ClassVar[ValueKind] = ValueKind.NUMBER


@dataclass(frozen=True)
class JsonBool(_Value):
    value: bool

    kind: ClassVar[ValueKind] = ValueKind.BOOLEAN


@dataclass(frozen=True)
class JsonNull(_Value):
    kind: ClassVar[ValueKind] = ValueKind.NULL


JsonValue = Union[JsonObject, JsonArray, JsonString, JsonNumber, JsonBool, JsonNull]

SCALAR_TYPES = (JsonString, JsonNumber, JsonBool)


def from_json(obj: Any) -> JsonValue:
    """Convert ``json``-decoded Python data into a tagged value tree.

    Args:
        obj: Result of ``json.loads`` (dict, list, str, int, float, bool, None)

    Returns:
        Equivalent value tree

    Raises:
        TypeError: If ``obj`` contains a non-JSON Python type
    """
    # bool must be tested before int: True is an int in Python.
    if obj is None:
        return JsonNull()
    if isinstance(obj, bool):
        return JsonBool(obj)
    if isinstance(obj, (int, float)):
        return JsonNumber(obj)
    if isinstance(obj, str):
        return JsonString(obj)
    if isinstance(obj, (list, tuple)):
        return JsonArray(tuple(from_json(item) for item in obj))
    if isinstance(obj, dict):
        members: dict[str, JsonValue] = {}
        for key, item in obj.items():
            if not isinstance(key, str):
                raise TypeError(f"JSON object keys must be strings, got {key!r}")
            members[key] = from_json(item)
        return JsonObject(members)
    raise TypeError(f"Not a JSON value: {type(obj).__name__}")


def to_python(value: JsonValue) -> Any:
    """Convert a value tree back into plain Python data."""
    if isinstance(value, JsonObject):
        return {key: to_python(item) for key, item in value.members.items()}
    if isinstance(value, JsonArray):
        return [to_python(item) for item in value.items]
    if isinstance(value, (JsonString, JsonNumber, JsonBool)):
        return value.value
    if isinstance(value, JsonNull):
        return None
    raise TypeError(f"Not a value tree node: {value!r}")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def loads(text: str) -> JsonValue:
    """Decode JSON text into a value tree.

    Raises:
        ValueError: If ``text`` is not valid JSON
    """
    return from_json(json.loads(text, parse_constant=_reject_constant))

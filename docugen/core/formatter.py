"""Turn resolved values into text according to a directive's format."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from ..errors import (
    FormatTypeMismatchError,
    InvalidValueError,
    NullEncounteredError,
    ResolveError,
    UnknownFormatSpecError,
    UnresolvedError,
)
from .dates import FhirDate
from .nodes import FormatSpec, PathExpr
from .values import (
    SCALAR_TYPES,
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonString,
    JsonValue,
    to_python,
)

logger = logging.getLogger(__name__)

DEFAULT_DATE_PATTERN = "%Y-%m-%d"
DEFAULT_JOIN_SEPARATOR = ", "
MAX_PRECISION = 20

# Floats at or beyond this magnitude keep their exponent form.
_PLAIN_FLOAT_LIMIT = 1e16


def natural_text(value: JsonValue) -> str:
    """Render a scalar the way it reads in JSON, minus quotes and padding."""
    if isinstance(value, JsonString):
        return value.value
    if isinstance(value, JsonBool):
        return "true" if value.value else "false"
    if isinstance(value, JsonNumber):
        number = value.value
        if isinstance(number, float):
            if number.is_integer() and abs(number) < _PLAIN_FLOAT_LIMIT:
                return str(int(number))
            return repr(number)
        return str(number)
    raise FormatTypeMismatchError("text", "a scalar", value.kind)


def _require(rule: str, value: JsonValue, expected: type, label: str) -> None:
    if not isinstance(value, expected):
        raise FormatTypeMismatchError(rule, label, value.kind)


# Argument checks: raise ValueError on a bad argument.


def _no_argument(rule: str, argument: str | None) -> None:
    if argument is not None:
        raise ValueError(f"Format '{rule}' takes no argument")


def _precision_argument(rule: str, argument: str | None) -> None:
    if argument is None:
        return
    if not argument.isdigit() or int(argument) > MAX_PRECISION:
        raise ValueError(
            f"Format '{rule}' precision must be an integer between 0 and {MAX_PRECISION}"
        )


def _pattern_argument(rule: str, argument: str | None) -> None:
    if argument is not None and argument == "":
        raise ValueError(f"Format '{rule}' pattern must not be empty")


def _any_argument(rule: str, argument: str | None) -> None:
    return None


# Rules


def _format_string(value: JsonValue, argument: str | None) -> str:
    _require("string", value, JsonString, "a string")
    return value.value


def _format_number(value: JsonValue, argument: str | None) -> str:
    _require("number", value, JsonNumber, "a number")
    if argument is None:
        return natural_text(value)
    number = value.value
    # Decimal keeps integers beyond float range exact.
    if isinstance(number, int):
        number = Decimal(number)
    return f"{number:.{int(argument)}f}"


def _parse_iso(text: str) -> date:
    raw = text.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    if "T" in raw or " " in raw:
        return datetime.fromisoformat(raw)
    return date.fromisoformat(raw)


def _format_date(value: JsonValue, argument: str | None) -> str:
    _require("date", value, JsonString, "an ISO-8601 date string")
    try:
        parsed = _parse_iso(value.value)
    except ValueError as exc:
        raise InvalidValueError("date", value.value, str(exc)) from exc
    return parsed.strftime(argument or DEFAULT_DATE_PATTERN)


def _format_fhirdate(value: JsonValue, argument: str | None) -> str:
    _require("fhirdate", value, JsonString, "a FHIR date string")
    try:
        return str(FhirDate.parse(value.value))
    except ValueError as exc:
        raise InvalidValueError("fhirdate", value.value, str(exc)) from exc


def _format_join(value: JsonValue, argument: str | None) -> str:
    _require("join", value, JsonArray, "an array")
    separator = DEFAULT_JOIN_SEPARATOR if argument is None else argument
    parts = []
    for item in value.items:
        if not isinstance(item, SCALAR_TYPES):
            raise FormatTypeMismatchError("join", "an array of scalars", item.kind)
        parts.append(natural_text(item))
    return separator.join(parts)


def _format_json(value: JsonValue, argument: str | None) -> str:
    return json.dumps(to_python(value), ensure_ascii=False, separators=(",", ":"))


@dataclass(frozen=True)
class FormatRule:
    name: str
    apply: Callable[[JsonValue, str | None], str]
    check_argument: Callable[[str, str | None], None]


FORMAT_RULES: dict[str, FormatRule] = {
    rule.name: rule
    for rule in (
        FormatRule("string", _format_string, _no_argument),
        FormatRule("number", _format_number, _precision_argument),
        FormatRule("date", _format_date, _pattern_argument),
        FormatRule("fhirdate", _format_fhirdate, _no_argument),
        FormatRule("join", _format_join, _any_argument),
        FormatRule("json", _format_json, _no_argument),
    )
}


def check_format_spec(spec: FormatSpec) -> None:
    """Validate a format spec before any value is seen.

    Raises:
        UnknownFormatSpecError: If no rule has the spec's name
        ValueError: If the rule rejects the argument
    """
    rule = FORMAT_RULES.get(spec.name)
    if rule is None:
        raise UnknownFormatSpecError(spec.name)
    rule.check_argument(spec.name, spec.argument)


def format_value(
    outcome: JsonValue | ResolveError,
    spec: FormatSpec | None = None,
    default: str | None = None,
    path: PathExpr | None = None,
) -> str:
    """Produce the text for one directive.

    Args:
        outcome: Resolved value, or the error resolution raised
        spec: Format to apply; natural text when omitted
        default: Fallback text for missing or null values
        path: Directive path, used to describe a terminal null

    Returns:
        Text to substitute

    Raises:
        FormatError: If the value is unavailable without a default, has the
            wrong shape for the format, or cannot be parsed by it
    """
    if isinstance(outcome, ResolveError):
        if default is not None:
            logger.debug(f"Using default for unresolved value: {outcome}")
            return default
        raise UnresolvedError(outcome)

    if isinstance(outcome, JsonNull):
        if default is not None:
            return default
        consumed = path.segments if path is not None else ()
        raise UnresolvedError(NullEncounteredError(consumed))

    if spec is None:
        return natural_text(outcome)

    rule = FORMAT_RULES.get(spec.name)
    if rule is None:
        raise UnknownFormatSpecError(spec.name)
    return rule.apply(outcome, spec.argument)

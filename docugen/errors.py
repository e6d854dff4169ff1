"""
Exceptions raised by docugen.

Every expected failure derives from DocugenError; the CLI reports these as
clean messages and exits with the class's ``exit_code``. Anything else is a
bug and propagates with its traceback.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from .core.nodes import Position, Segment, format_path
from .core.values import ValueKind


class DocugenError(Exception):
    """Base class for all user-facing errors."""

    exit_code = 1


class ConfigError(DocugenError):
    """Configuration file missing, unreadable or invalid."""

    exit_code = 6


class FetchError(DocugenError):
    """The source document could not be retrieved or decoded."""

    exit_code = 5


class ParseErrorKind(str, Enum):
    UNTERMINATED_DIRECTIVE = "unterminated-directive"
    EMPTY_PATH = "empty-path"
    MALFORMED_PATH = "malformed-path"
    MALFORMED_SUFFIX = "malformed-suffix"
    UNKNOWN_FORMAT = "unknown-format"


class ParseError(DocugenError):
    """Template text is not valid directive syntax."""

    exit_code = 3

    def __init__(self, kind: ParseErrorKind, detail: str, position: Position) -> None:
        self.kind = kind
        self.detail = detail
        self.position = position
        super().__init__(f"{detail} at {position}")


# Resolution


class ResolveError(DocugenError):
    """A path expression does not address a value in the document.

    ``consumed`` holds the path segments walked successfully before the
    failure.
    """

    def __init__(self, consumed: Sequence[Segment], message: str) -> None:
        self.consumed = tuple(consumed)
        super().__init__(f"{message} (at {format_path(self.consumed)})")


class MissingFieldError(ResolveError):
    def __init__(self, consumed: Sequence[Segment], key: str) -> None:
        self.key = key
        super().__init__(consumed, f"Missing field '{key}'")


class IndexOutOfBoundsError(ResolveError):
    def __init__(self, consumed: Sequence[Segment], index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(
            consumed, f"Index {index} out of bounds for array of length {length}"
        )


class PathTypeMismatchError(ResolveError):
    def __init__(
        self, consumed: Sequence[Segment], expected: ValueKind, actual: ValueKind
    ) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            consumed, f"Expected {expected.value} but found {actual.value}"
        )


class NullEncounteredError(ResolveError):
    def __init__(self, consumed: Sequence[Segment]) -> None:
        super().__init__(consumed, "Encountered null")


# Formatting


class FormatError(DocugenError):
    """A directive value could not be turned into text."""


class UnresolvedError(FormatError):
    def __init__(self, cause: ResolveError) -> None:
        self.cause = cause
        super().__init__(f"Unresolved value: {cause}")


class FormatTypeMismatchError(FormatError):
    def __init__(self, rule: str, expected: str, actual: ValueKind) -> None:
        self.rule = rule
        self.expected = expected
        self.actual = actual
        super().__init__(f"Format '{rule}' expects {expected}, got {actual.value}")


class UnknownFormatSpecError(FormatError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown format '{name}'")


class InvalidValueError(FormatError):
    def __init__(self, rule: str, value: str, reason: str) -> None:
        self.rule = rule
        self.value = value
        self.reason = reason
        super().__init__(f"Format '{rule}' cannot handle {value!r}: {reason}")


class RenderError(DocugenError):
    """A directive failed under strict rendering."""

    exit_code = 4

    def __init__(self, error: FormatError, position: Position, directive: str) -> None:
        self.error = error
        self.position = position
        self.directive = directive
        super().__init__(f"{directive} at {position}: {error}")

    @property
    def reason(self) -> DocugenError:
        """The resolve error behind an unresolved value, else the format error."""
        if isinstance(self.error, UnresolvedError):
            return self.error.cause
        return self.error

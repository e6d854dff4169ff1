"""
Single-pass parser for template text.

Grammar::

    template   := ( escape | directive | char )*
    escape     := "\\" ( "{" | "}" | "\\" )
    directive  := "{{" ws path ws suffix* "}}"
    path       := segment ( "." segment | "[" digits "]" )*
    segment    := name | digits
    suffix     := "|" ws ident ws ( ":" ws param )? ws
    param      := '"' quoted-chars '"' | bare-chars

``default`` is the reserved suffix holding a fallback value; every other
suffix names a format rule. Inside both quoted and bare params a backslash
escapes ``{ } \\ | "``.

An all-digit segment is always an array index, so object members whose key
is made of digits cannot be addressed.
"""

from __future__ import annotations

import logging
import re

from ..errors import ParseError, ParseErrorKind, UnknownFormatSpecError
from .formatter import check_format_spec
from .nodes import (
    Directive,
    Field,
    FormatSpec,
    Index,
    Literal,
    Node,
    PathExpr,
    Position,
    Segment,
    Template,
)

logger = logging.getLogger(__name__)

OPEN = "{{"
CLOSE = "}}"
ESCAPE = "\\"
ESCAPABLE = "{}\\"
QUOTE = '"'
PARAM_ESCAPABLE = ESCAPABLE + "|" + QUOTE
DEFAULT_SUFFIX = "default"

_NAME = re.compile(r"[A-Za-z_@$][A-Za-z0-9_@$-]*")
_DIGITS = re.compile(r"[0-9]+")
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_WS = " \t\r\n"


class _DirectiveBody:
    """Cursor over the text between one pair of delimiters."""

    def __init__(self, parser: TemplateParser, text: str, start: int) -> None:
        self.parser = parser
        self.text = text
        self.start = start
        self.pos = 0

    def fail(self, kind: ParseErrorKind, detail: str) -> ParseError:
        return self.parser.error(kind, detail, self.start)

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _WS:
            self.pos += 1

    def match(self, pattern: re.Pattern[str]) -> str | None:
        found = pattern.match(self.text, self.pos)
        if found is None:
            return None
        self.pos = found.end()
        return found.group()

    def path(self) -> PathExpr:
        self.skip_ws()
        if self.at_end() or self.peek() == "|":
            raise self.fail(ParseErrorKind.EMPTY_PATH, "Empty path in directive")

        segments: list[Segment] = [self.segment()]
        while not self.at_end():
            char = self.peek()
            if char == ".":
                self.pos += 1
                segments.append(self.segment())
            elif char == "[":
                self.pos += 1
                digits = self.match(_DIGITS)
                if digits is None or self.peek() != "]":
                    raise self.fail(
                        ParseErrorKind.MALFORMED_PATH, "Expected array index inside '[...]'"
                    )
                self.pos += 1
                segments.append(Index(int(digits)))
            else:
                break

        self.skip_ws()
        if not self.at_end() and self.peek() != "|":
            raise self.fail(
                ParseErrorKind.MALFORMED_PATH,
                f"Unexpected {self.peek()!r} in path at directive column {self.pos + 1}",
            )
        return PathExpr(tuple(segments))

    def segment(self) -> Segment:
        digits = self.match(_DIGITS)
        if digits is not None:
            return Index(int(digits))
        name = self.match(_NAME)
        if name is None:
            found = self.peek() or "end of directive"
            raise self.fail(
                ParseErrorKind.MALFORMED_PATH, f"Expected field name or index, found {found!r}"
            )
        return Field(name)

    def suffixes(self) -> tuple[FormatSpec | None, str | None]:
        format_spec: FormatSpec | None = None
        default: str | None = None

        while not self.at_end():
            # path() and param() leave the cursor on "|" or at the end
            self.pos += 1
            self.skip_ws()
            name = self.match(_IDENT)
            if name is None:
                raise self.fail(ParseErrorKind.MALFORMED_SUFFIX, "Expected a name after '|'")
            self.skip_ws()

            argument: str | None = None
            if self.peek() == ":":
                self.pos += 1
                argument = self.param()
            elif not self.at_end() and self.peek() != "|":
                raise self.fail(
                    ParseErrorKind.MALFORMED_SUFFIX,
                    f"Unexpected {self.peek()!r} after '{name}'",
                )

            if name == DEFAULT_SUFFIX:
                if default is not None:
                    raise self.fail(ParseErrorKind.MALFORMED_SUFFIX, "Duplicate default")
                if argument is None:
                    raise self.fail(
                        ParseErrorKind.MALFORMED_SUFFIX, "Default needs a value: 'default:VALUE'"
                    )
                default = argument
                continue

            if format_spec is not None:
                raise self.fail(
                    ParseErrorKind.MALFORMED_SUFFIX,
                    f"Only one format allowed, got '{format_spec.name}' and '{name}'",
                )
            format_spec = FormatSpec(name, argument)
            try:
                check_format_spec(format_spec)
            except UnknownFormatSpecError as exc:
                raise self.fail(ParseErrorKind.UNKNOWN_FORMAT, str(exc)) from exc
            except ValueError as exc:
                raise self.fail(ParseErrorKind.MALFORMED_SUFFIX, str(exc)) from exc

        return format_spec, default

    def param(self) -> str:
        self.skip_ws()
        if self.peek() != QUOTE:
            return self.bare_param()

        self.pos += 1
        chars: list[str] = []
        while True:
            if self.at_end():
                raise self.fail(ParseErrorKind.MALFORMED_SUFFIX, "Unterminated quoted value")
            char = self.text[self.pos]
            if char == ESCAPE and self.pos + 1 < len(self.text):
                chars.append(self.text[self.pos + 1])
                self.pos += 2
                continue
            self.pos += 1
            if char == QUOTE:
                break
            chars.append(char)

        self.skip_ws()
        if not self.at_end() and self.peek() != "|":
            raise self.fail(
                ParseErrorKind.MALFORMED_SUFFIX, "Unexpected text after quoted value"
            )
        return "".join(chars)

    def bare_param(self) -> str:
        """Unquoted value up to the next unescaped ``|``, trailing blanks trimmed."""
        chars: list[str] = []
        kept = 0
        while not self.at_end():
            char = self.text[self.pos]
            if char == "|":
                break
            if (
                char == ESCAPE
                and self.pos + 1 < len(self.text)
                and self.text[self.pos + 1] in PARAM_ESCAPABLE
            ):
                chars.append(self.text[self.pos + 1])
                self.pos += 2
                kept = len(chars)
                continue
            chars.append(char)
            self.pos += 1
            if char not in _WS:
                kept = len(chars)
        return "".join(chars[:kept])


class TemplateParser:
    """Builds a Template from raw text in one left-to-right pass."""

    def __init__(self, source: str) -> None:
        self.source = source

    def error(self, kind: ParseErrorKind, detail: str, offset: int) -> ParseError:
        return ParseError(kind, detail, Position.from_offset(self.source, offset))

    def parse(self) -> Template:
        source = self.source
        length = len(source)
        nodes: list[Node] = []
        chunk: list[str] = []
        literal_start = 0
        pos = 0

        while pos < length:
            char = source[pos]
            if char == ESCAPE and pos + 1 < length and source[pos + 1] in ESCAPABLE:
                chunk.append(source[pos + 1])
                pos += 2
                continue
            if source.startswith(OPEN, pos):
                if pos > literal_start:
                    nodes.append(Literal("".join(chunk), literal_start, pos))
                chunk = []
                directive = self._directive(pos)
                nodes.append(directive)
                pos = literal_start = directive.end
                continue
            chunk.append(char)
            pos += 1

        if pos > literal_start:
            nodes.append(Literal("".join(chunk), literal_start, pos))

        template = Template(source, tuple(nodes))
        logger.debug(
            f"Parsed template into {len(nodes)} node(s), "
            f"{len(template.directives)} directive(s)"
        )
        return template

    def _find_close(self, start: int) -> int:
        """Offset of the ``}}`` closing the directive opened at ``start``."""
        source = self.source
        pos = start + len(OPEN)
        while pos < len(source):
            if source[pos] == ESCAPE:
                pos += 2
                continue
            if source.startswith(CLOSE, pos):
                return pos
            if source.startswith(OPEN, pos):
                break
            pos += 1
        raise self.error(
            ParseErrorKind.UNTERMINATED_DIRECTIVE,
            f"Unterminated directive: no '{CLOSE}' for this '{OPEN}'",
            start,
        )

    def _directive(self, start: int) -> Directive:
        close = self._find_close(start)
        end = close + len(CLOSE)
        body = _DirectiveBody(self, self.source[start + len(OPEN) : close], start)
        path = body.path()
        format_spec, default = body.suffixes()
        return Directive(
            path=path,
            format_spec=format_spec,
            default=default,
            start=start,
            end=end,
            source=self.source[start:end],
        )


def parse_template(text: str) -> Template:
    """Parse template text.

    Raises:
        ParseError: On an unterminated or malformed directive
    """
    return TemplateParser(text).parse()

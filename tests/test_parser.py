"""
Tests for the template parser.
"""

import pytest

from docugen.core.nodes import Directive, Field, FormatSpec, Index, Literal, PathExpr
from docugen.core.parser import parse_template
from docugen.errors import ParseError, ParseErrorKind


def only_directive(text: str) -> Directive:
    directives = parse_template(text).directives
    assert len(directives) == 1
    return directives[0]


class TestLiterals:

    def test_empty_template(self):
        assert parse_template("").nodes == ()

    def test_plain_text_is_one_literal(self):
        template = parse_template("HELLO_WORLD")
        assert template.nodes == (Literal("HELLO_WORLD", 0, 11),)

    def test_lone_braces_pass_through(self):
        text = "a { b } c }} d"
        template = parse_template(text)
        assert template.nodes == (Literal(text, 0, len(text)),)

    def test_escaped_braces_and_backslash(self):
        template = parse_template(r"a\{b\}c\\d")
        assert template.nodes == (Literal("a{b}c\\d", 0, 10),)

    def test_other_backslashes_are_literal(self):
        text = r"C:\path\to\file"
        assert parse_template(text).nodes == (Literal(text, 0, len(text)),)

    def test_escaped_opening_delimiter(self):
        text = r"\{{ name }}"
        template = parse_template(text)
        assert template.nodes == (Literal("{{ name }}", 0, len(text)),)
        assert template.directives == []


class TestDirectives:

    def test_hello_name(self):
        template = parse_template("Hello {{name}}!")
        assert template.nodes == (
            Literal("Hello ", 0, 6),
            Directive(
                path=PathExpr((Field("name"),)),
                format_spec=None,
                default=None,
                start=6,
                end=14,
                source="{{name}}",
            ),
            Literal("!", 14, 15),
        )

    def test_whitespace_around_path(self):
        assert only_directive("{{ \t xxxx   }}").path == PathExpr((Field("xxxx"),))

    def test_newlines_inside_directive(self):
        assert only_directive("{{\n  name\n}}").path == PathExpr((Field("name"),))

    @pytest.mark.parametrize("name", ["a_c", "_x", "a_", "birthDate", "resource-type"])
    def test_field_names(self, name):
        assert only_directive("{{ %s }}" % name).path == PathExpr((Field(name),))

    def test_dotted_and_bracketed_indices(self):
        directive = only_directive("{{ name.0.given[1] }}")
        assert directive.path.segments == (Field("name"), Index(0), Field("given"), Index(1))

    def test_leading_index(self):
        directive = only_directive("{{ 0.name }}")
        assert directive.path.segments == (Index(0), Field("name"))

    def test_default(self):
        directive = only_directive("{{missing|default:N/A}}")
        assert directive.path == PathExpr((Field("missing"),))
        assert directive.default == "N/A"
        assert directive.format_spec is None

    def test_bare_default_is_trimmed(self):
        assert only_directive("{{ a | default:  not known  }}").default == "not known"

    def test_quoted_default_keeps_spaces_and_pipes(self):
        assert only_directive('{{ a | default:" | " }}').default == " | "

    def test_quoted_default_escapes(self):
        assert only_directive(r'{{ a | default:"say \"hi\" \}\}" }}').default == 'say "hi" }}'

    def test_bare_default_escapes(self):
        assert only_directive(r"{{ a | default:\}} }}").default == "}}"
        assert only_directive(r"{{ a | default:x \| y | string }}").default == "x | y"

    def test_bare_default_keeps_other_backslashes(self):
        assert only_directive(r"{{ a | default:C:\temp }}").default == r"C:\temp"

    def test_empty_default(self):
        assert only_directive("{{ a | default: }}").default == ""

    def test_format_with_argument(self):
        assert only_directive("{{ weight | number:2 }}").format_spec == FormatSpec("number", "2")

    def test_format_argument_with_colons(self):
        directive = only_directive("{{ t | date:%H:%M }}")
        assert directive.format_spec == FormatSpec("date", "%H:%M")

    def test_format_and_default_in_any_order(self):
        first = only_directive("{{ d | fhirdate | default:unknown }}")
        second = only_directive("{{ d | default:unknown | fhirdate }}")
        for directive in (first, second):
            assert directive.format_spec == FormatSpec("fhirdate")
            assert directive.default == "unknown"

    def test_letter_example(self):
        template = parse_template(r"Please find attached \{{{ attachment_name }}\}!")
        literals = [node.text for node in template.nodes if isinstance(node, Literal)]
        assert literals == ["Please find attached {", "}!"]
        assert template.directives[0].path == PathExpr((Field("attachment_name"),))

    def test_spans_tile_the_source(self):
        text = "Dear {{ name.0.family }},\n\\{x\\} {{ birthDate | fhirdate }}{{a}} end }}"
        template = parse_template(text)
        assert template.nodes[0].start == 0
        for previous, current in zip(template.nodes, template.nodes[1:]):
            assert previous.end == current.start
        assert template.nodes[-1].end == len(text)
        for directive in template.directives:
            assert text[directive.start:directive.end] == directive.source


class TestParseErrors:

    def assert_error(self, text, kind, offset):
        with pytest.raises(ParseError) as excinfo:
            parse_template(text)
        assert excinfo.value.kind == kind
        assert excinfo.value.position.offset == offset
        return excinfo.value

    def test_unterminated_at_end(self):
        error = self.assert_error("Hello {{name", ParseErrorKind.UNTERMINATED_DIRECTIVE, 6)
        assert error.position.line == 1
        assert error.position.column == 7

    def test_unterminated_before_next_opening(self):
        self.assert_error("{{ a {{ b }}", ParseErrorKind.UNTERMINATED_DIRECTIVE, 0)

    def test_line_and_column(self):
        error = self.assert_error(
            "line one\nline {{ two", ParseErrorKind.UNTERMINATED_DIRECTIVE, 14
        )
        assert (error.position.line, error.position.column) == (2, 6)

    def test_byte_offset_counts_utf8(self):
        error = self.assert_error("héllo {{ x", ParseErrorKind.UNTERMINATED_DIRECTIVE, 6)
        assert error.position.byte_offset == 7

    @pytest.mark.parametrize("text", ["{{}}", "{{   }}", "{{|default:x}}"])
    def test_empty_path(self, text):
        self.assert_error(text, ParseErrorKind.EMPTY_PATH, 0)

    @pytest.mark.parametrize(
        "text",
        [
            "{{ \t separated identifiers illegal }}",
            "{{ a..b }}",
            "{{ a. }}",
            "{{ a[x] }}",
            "{{ a[1 }}",
            "{{{name}}}",
        ],
    )
    def test_malformed_path(self, text):
        self.assert_error(text, ParseErrorKind.MALFORMED_PATH, 0)

    def test_unknown_format(self):
        self.assert_error("x {{ a | shout }}", ParseErrorKind.UNKNOWN_FORMAT, 2)

    @pytest.mark.parametrize(
        "text",
        [
            "{{ a | }}",
            "{{ a | default }}",
            "{{ a | default:x | default:y }}",
            "{{ a | string | number }}",
            "{{ a | number:two }}",
            "{{ a | number:21 }}",
            "{{ a | string:x }}",
            '{{ a | default:"x }}',
            '{{ a | default:"x" y }}',
            "{{ a | json extra }}",
        ],
    )
    def test_malformed_suffix(self, text):
        self.assert_error(text, ParseErrorKind.MALFORMED_SUFFIX, 0)

    def test_message_mentions_position(self):
        error = self.assert_error("ab{{", ParseErrorKind.UNTERMINATED_DIRECTIVE, 2)
        assert "line 1, column 3" in str(error)

"""Template rendering engine."""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.formatter import format_value
from ..core.models import RenderedDocument, RenderOptions, RenderWarning
from ..core.nodes import Directive, Literal, Template
from ..core.parser import parse_template
from ..core.resolver import resolve
from ..core.values import JsonValue
from ..errors import FormatError, RenderError, ResolveError

logger = logging.getLogger(__name__)


def load_template(template_path: Path) -> Template:
    """Read and parse a template file.

    Args:
        template_path: Path to the template file

    Returns:
        Parsed template

    Raises:
        FileNotFoundError: If the file does not exist
        ParseError: If the template text is malformed
    """
    if not template_path.exists():
        raise FileNotFoundError(f"Template not found: {template_path}")

    logger.debug(f"Loading template: {template_path}")
    return parse_template(template_path.read_text(encoding="utf-8"))


def _render_directive(directive: Directive, root: JsonValue) -> str:
    outcome: JsonValue | ResolveError
    try:
        outcome = resolve(directive.path, root)
    except ResolveError as exc:
        outcome = exc
    return format_value(
        outcome, directive.format_spec, directive.default, path=directive.path
    )


def render(
    template: Template, root: JsonValue, options: RenderOptions | None = None
) -> RenderedDocument:
    """Fill a parsed template with values from ``root``.

    Args:
        template: Parsed template
        root: Document the directives address
        options: Rendering policy (strict by default)

    Returns:
        Rendered text plus warnings collected in lenient mode

    Raises:
        RenderError: In strict mode, for the first directive that fails
    """
    options = options or RenderOptions()
    parts: list[str] = []
    warnings: list[RenderWarning] = []

    for node in template.nodes:
        if isinstance(node, Literal):
            parts.append(node.text)
            continue

        try:
            parts.append(_render_directive(node, root))
        except FormatError as exc:
            position = template.position(node.start)
            if options.strict:
                raise RenderError(exc, position, node.source) from exc
            logger.warning(f"{node.source} at {position}: {exc}")
            warnings.append(
                RenderWarning(
                    directive=node.source,
                    offset=position.offset,
                    line=position.line,
                    column=position.column,
                    message=str(exc),
                )
            )

    logger.debug(
        f"Rendered {len(template.directives)} directive(s) with {len(warnings)} warning(s)"
    )
    return RenderedDocument(text="".join(parts), warnings=warnings)


def render_text(
    text: str, root: JsonValue, options: RenderOptions | None = None
) -> RenderedDocument:
    """Parse ``text`` and render it against ``root``."""
    return render(parse_template(text), root, options)

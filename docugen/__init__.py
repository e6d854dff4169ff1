"""Docugen - fill report templates with values from a FHIR JSON resource.

Templates carry ``{{ path | format | default: value }}`` directives that are
resolved against the fetched JSON document.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .core.models import RenderedDocument, RenderOptions, RenderWarning
from .core.parser import parse_template
from .core.values import from_json, loads
from .rendering.engine import load_template, render, render_text

__all__ = [
    "RenderOptions",
    "RenderWarning",
    "RenderedDocument",
    "from_json",
    "load_template",
    "loads",
    "parse_template",
    "render",
    "render_text",
]

"""Options and results of a render call."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RenderOptions(BaseModel):
    """Caller-selected rendering policy."""

    model_config = ConfigDict(frozen=True)

    strict: bool = Field(
        default=True,
        description="Abort on the first failing directive; otherwise substitute "
        "empty text and record a warning",
    )


class RenderWarning(BaseModel):
    """A directive that failed under lenient rendering."""

    directive: str = Field(..., description="Directive source text")
    offset: int = Field(..., description="Offset of the directive in the template")
    line: int = Field(..., description="1-based line of the directive")
    column: int = Field(..., description="1-based column of the directive")
    message: str = Field(..., description="Why the directive rendered empty")


class RenderedDocument(BaseModel):
    """Output of a successful render."""

    text: str = Field(..., description="Rendered document text")
    warnings: list[RenderWarning] = Field(
        default_factory=list, description="Directives substituted with empty text"
    )

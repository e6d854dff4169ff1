"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .. import __version__
from ..core.models import RenderOptions
from ..errors import DocugenError
from ..rendering import engine
from ..rendering.io import write_document
from ..settings import load_settings
from ..web import bundles, client
from .parsers import log_level_for, parse_endpoint

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="docugen",
    help="Fetch data from a FHIR API endpoint and fill out a document template.",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"docugen {__version__}")
        raise typer.Exit()


@app.command()
def render(
    endpoint: Annotated[
        str,
        typer.Argument(
            help="Endpoint to fetch, e.g. /api/Patient. Host and port come from the config file.",
            metavar="ENDPOINT",
        ),
    ],
    template: Annotated[
        Path,
        typer.Argument(
            help="Template file to fill with the fetched data.",
            metavar="TEMPLATE",
        ),
    ],
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Config file (.toml, .yaml or .yml). Default: ./docugen.toml if present.",
            metavar="FILE",
        ),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Write the document to FILE instead of stdout.",
            metavar="FILE",
        ),
    ] = None,
    lenient: Annotated[
        bool,
        typer.Option(
            "--lenient",
            help="Render failing directives as empty text and log a warning instead of aborting.",
        ),
    ] = False,
    entries: Annotated[
        bool,
        typer.Option(
            "--entries",
            help="Unwrap FHIR Bundles: render against the array of entry resources.",
        ),
    ] = False,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase logging verbosity (-v info, -vv debug).",
        ),
    ] = 0,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    """Render TEMPLATE with the JSON document served at ENDPOINT."""
    resource_path = parse_endpoint(endpoint)

    try:
        settings = load_settings(config)
    except DocugenError as exc:
        logging.basicConfig(level=logging.ERROR, format="[%(levelname)s] %(message)s")
        logger.error(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    # Configure logging
    logging.basicConfig(
        level=log_level_for(verbose, settings.logging),
        format="[%(levelname)s] %(message)s",
    )
    logger.debug(f"Settings: {settings.model_dump()}")

    try:
        parsed = engine.load_template(template)
        document = client.fetch_document(settings.web_api, resource_path)
        if entries:
            document = bundles.bundle_resources(document)
        rendered = engine.render(
            parsed, document, RenderOptions(strict=not lenient)
        )
        if rendered.warnings:
            logger.warning(f"{len(rendered.warnings)} directive(s) rendered empty")
        write_document(rendered.text, output)
    except OSError as exc:
        logger.error(str(exc))
        raise typer.Exit(code=1) from exc
    except DocugenError as exc:
        logger.error(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    if output is not None:
        logger.info(f"Rendered {template} → {output}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

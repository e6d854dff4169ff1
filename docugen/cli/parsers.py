"""CLI argument parsers and validators."""

from __future__ import annotations

import logging

import typer

from ..settings import LoggingSettings


def parse_endpoint(value: str) -> str:
    """Normalize an endpoint argument to a path starting with '/'."""
    endpoint = value.strip()
    if not endpoint or endpoint == "/":
        raise typer.BadParameter("Endpoint must name a resource, e.g. /api/Patient")
    if "://" in endpoint:
        raise typer.BadParameter(
            f"Endpoint is a path, not a URL; configure the host in the config file: {value!r}"
        )
    return "/" + endpoint.lstrip("/")


def log_level_for(verbosity: int, configured: LoggingSettings) -> int:
    """Pick the logging level: -v means INFO, -vv or more DEBUG, else the config."""
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return configured.python_level

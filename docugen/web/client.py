"""Retrieval of the source JSON document from the web API."""

from __future__ import annotations

import logging

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..core.values import JsonValue, loads
from ..errors import FetchError
from ..settings import WebApiSettings

logger = logging.getLogger(__name__)

MAX_RETRY_WAIT_SECONDS = 30


class TransientFetchError(FetchError):
    """A failure worth retrying: connection problems, timeouts, 429 and 5xx."""


def build_url(web_api: WebApiSettings, endpoint: str) -> str:
    """Join the configured base URL with an endpoint such as ``/api/Patient``."""
    return f"{web_api.base_url}/{endpoint.lstrip('/')}"


def _get_once(
    session: requests.Session, url: str, web_api: WebApiSettings
) -> requests.Response:
    try:
        response = session.get(
            url,
            timeout=web_api.timeout_seconds,
            verify=web_api.verify_tls,
            headers={"Accept": "application/json"},
        )
    except (requests.ConnectionError, requests.Timeout) as exc:
        raise TransientFetchError(f"GET {url} failed: {exc}") from exc
    except requests.RequestException as exc:
        raise FetchError(f"GET {url} failed: {exc}") from exc

    status = response.status_code
    if status == 429 or status >= 500:
        raise TransientFetchError(f"GET {url} returned HTTP {status}")
    if status >= 400:
        raise FetchError(f"GET {url} returned HTTP {status}")
    return response


def fetch_document(
    web_api: WebApiSettings, endpoint: str, session: requests.Session | None = None
) -> JsonValue:
    """Fetch ``endpoint`` and decode its JSON body into a value tree.

    Args:
        web_api: Endpoint host, scheme and retry policy
        endpoint: Resource path, e.g. ``/api/Patient``
        session: Session to use; a new one is opened when omitted

    Returns:
        Decoded document

    Raises:
        FetchError: If the request keeps failing or the body is not JSON
    """
    url = build_url(web_api, endpoint)
    logger.info(f"Requesting {url}")

    retryer = Retrying(
        reraise=True,
        retry=retry_if_exception_type(TransientFetchError),
        stop=stop_after_attempt(web_api.retry_attempts),
        wait=wait_exponential(
            multiplier=web_api.retry_wait_seconds,
            min=0,
            max=MAX_RETRY_WAIT_SECONDS,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )

    if session is None:
        with requests.Session() as owned:
            response = retryer(_get_once, owned, url, web_api)
    else:
        response = retryer(_get_once, session, url, web_api)

    try:
        document = loads(response.text)
    except ValueError as exc:
        raise FetchError(f"Response from {url} is not valid JSON: {exc}") from exc

    logger.debug(f"Received {len(response.text)} characters from {url}")
    return document

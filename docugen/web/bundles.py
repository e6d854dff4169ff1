"""Unwrapping of FHIR search results.

The API answers searches with a Bundle, or an array of Bundles of about ten
entries each; every entry wraps one resource::

    [{"resourceType": "Bundle", "entry": [{"resource": {...}}, ...]}, ...]
"""

from __future__ import annotations

import logging

from ..core.values import JsonArray, JsonObject, JsonValue
from ..errors import FetchError

logger = logging.getLogger(__name__)


class BundleShapeError(FetchError):
    """The document is not a Bundle or an array of Bundles."""


def _bundle_resources(bundle: JsonValue, where: str) -> list[JsonValue]:
    if not isinstance(bundle, JsonObject):
        raise BundleShapeError(f"{where} is a {bundle.kind_name}, expected a Bundle object")

    entries = bundle.get("entry")
    if entries is None:
        # A search with no matches has no "entry" member.
        return []
    if not isinstance(entries, JsonArray):
        raise BundleShapeError(f"{where}.entry is a {entries.kind_name}, expected an array")

    resources: list[JsonValue] = []
    for index, entry in enumerate(entries.items):
        resource = entry.get("resource") if isinstance(entry, JsonObject) else None
        if resource is None:
            raise BundleShapeError(f"{where}.entry.{index} has no resource")
        resources.append(resource)
    return resources


def bundle_resources(document: JsonValue) -> JsonArray:
    """Collect ``entry[].resource`` from a Bundle or an array of Bundles.

    Raises:
        BundleShapeError: If the document has another shape
    """
    if isinstance(document, JsonArray):
        resources: list[JsonValue] = []
        for index, bundle in enumerate(document.items):
            resources.extend(_bundle_resources(bundle, f"$.{index}"))
    else:
        resources = _bundle_resources(document, "$")

    logger.debug(f"Unwrapped {len(resources)} resource(s) from bundle")
    return JsonArray(tuple(resources))

"""Web API access: fetching documents and unwrapping FHIR bundles."""

from .bundles import BundleShapeError, bundle_resources
from .client import build_url, fetch_document

__all__ = ["BundleShapeError", "build_url", "bundle_resources", "fetch_document"]

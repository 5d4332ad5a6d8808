"""Public interface for the Consul adapter."""

from __future__ import annotations

from .client import ConsulAPIError, ConsulCatalogClient
from .schema import CatalogNodePayload

__all__ = ["CatalogNodePayload", "ConsulAPIError", "ConsulCatalogClient"]

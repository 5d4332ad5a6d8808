"""Public interface for the Circonus adapter."""

from __future__ import annotations

from .client import CirconusAPIError, CirconusClient, target_search_query
from .schema import CheckBundleMetricsPayload, CheckBundlePayload, MetricSearchPayload

__all__ = [
    "CheckBundleMetricsPayload",
    "CheckBundlePayload",
    "CirconusAPIError",
    "CirconusClient",
    "MetricSearchPayload",
    "target_search_query",
]

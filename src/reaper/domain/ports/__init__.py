"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import ServiceCatalog
from .monitoring import MonitoringBackend, SearchFilters
from .orchestrator import Orchestrator

__all__ = [
    "MonitoringBackend",
    "Orchestrator",
    "SearchFilters",
    "ServiceCatalog",
]

"""Reconciliation core: decide which Circonus metrics should still be collected.

Layered flow for a consul/nomad run:
1) snapshot Consul hosts, Circonus targets and the Nomad node map
2) partition hosts into Consul-only, Circonus-only and shared
3) deactivate check bundles of Circonus-only hosts
4) toggle allocation metrics of shared hosts by allocation liveness

A query run replaces all of the above with a search-driven silencing pass.
"""

from __future__ import annotations

from .allocations import (
    AllocationCorrelator,
    allocation_metric_pattern,
    check_bundle_id,
    decide_status,
    extract_allocation_id,
)
from .engine import ReconciliationEngine, ReconciliationSnapshot
from .exclusion import ExclusionRules
from .options import Mode, ReconcileOptions
from .query import QuerySelector
from .sets import TargetSets, find_sets
from .stats import RunStats

__all__ = [
    "AllocationCorrelator",
    "ExclusionRules",
    "Mode",
    "QuerySelector",
    "ReconcileOptions",
    "ReconciliationEngine",
    "ReconciliationSnapshot",
    "RunStats",
    "TargetSets",
    "allocation_metric_pattern",
    "check_bundle_id",
    "decide_status",
    "extract_allocation_id",
    "find_sets",
]

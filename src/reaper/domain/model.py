"""Domain types shared by the reconciliation engine and its ports (pure, no I/O)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

type Host = str


class MetricStatus(StrEnum):
    ACTIVE = "active"
    AVAILABLE = "available"


@dataclass(slots=True)
class BundleMetric:
    """One metric entry of a check bundle.

    ``status`` is kept as the raw backend string; values outside
    :class:`MetricStatus` are only rejected when a decision depends on them.
    ``attributes`` carries every other backend field so write-backs do not drop them.
    """

    name: str
    status: str
    attributes: dict[str, object] = field(default_factory=dict[str, object])


@dataclass(slots=True)
class CheckBundle:
    cid: str
    target: Host
    metrics: list[BundleMetric] = field(default_factory=list[BundleMetric])
    attributes: dict[str, object] = field(default_factory=dict[str, object])


@dataclass(slots=True)
class CheckBundleMetrics:
    """Per-metric detail collection of a check bundle (``/check_bundle_metrics/<id>``)."""

    cid: str
    metrics: list[BundleMetric] = field(default_factory=list[BundleMetric])


@dataclass(slots=True, frozen=True)
class MetricSearchHit:
    cid: str
    check_bundle_cid: str
    metric_name: str


@dataclass(slots=True, frozen=True)
class OrchestratorNode:
    name: str
    id: str


@dataclass(slots=True, frozen=True)
class Allocation:
    """A unit of scheduled work; listed means live, whatever ``client_status`` says."""

    id: str
    client_status: str | None = None

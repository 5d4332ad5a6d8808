"""Correlate per-allocation metrics with the allocations the orchestrator still runs.

Nomad clients report allocation metrics under names such as::

    nomad`<host>`client`allocs`<job>`<group>`<alloc-id>`<task>`memory`rss

A metric whose allocation is still listed for the node should be collected
(``active``); one whose allocation is gone should stop being collected
(``available``). Metrics that do not follow the naming convention are never touched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from reaper.domain.errors import CollaboratorError, IntegrityViolation
from reaper.domain.model import MetricStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from reaper.domain.model import BundleMetric, CheckBundle, Host
    from reaper.domain.ports import MonitoringBackend, Orchestrator

    from .options import ReconcileOptions
    from .stats import RunStats

log = getLogger(__name__)

CHECK_BUNDLE_CID_PATTERN = re.compile(r"^(/check_bundle)/([0-9]+)$")
CHECK_BUNDLE_METRICS_PREFIX = "/check_bundle_metrics"
ALLOCATION_ID_GROUP = r"([\da-f]{8}-[\da-f]{4}-[\da-f]{4}-[\da-f]{4}-[\da-f]{12})"


def allocation_metric_pattern(host: Host) -> re.Pattern[str]:
    """Pattern matching allocation metrics reported by the Nomad client ``host``."""

    return re.compile(
        rf"^nomad`{re.escape(host)}`client`allocs`.*`{ALLOCATION_ID_GROUP}(?:`|$)",
        re.IGNORECASE,
    )


def extract_allocation_id(pattern: re.Pattern[str], metric_name: str) -> str | None:
    match = pattern.match(metric_name)
    if match is None:
        return None
    return match.group(1).lower()


def check_bundle_id(cid: str) -> str | None:
    """Return the numeric ID of a ``/check_bundle/<id>`` CID, or ``None`` if malformed."""

    match = CHECK_BUNDLE_CID_PATTERN.match(cid)
    if match is None:
        return None
    return match.group(2)


def decide_status(metric_name: str, status: str, *, live: bool) -> MetricStatus | None:
    """Return the status ``metric_name`` should move to, or ``None`` when it is settled.

    Raises :class:`IntegrityViolation` for any status other than active/available.
    """

    if status == MetricStatus.ACTIVE:
        return None if live else MetricStatus.AVAILABLE
    if status == MetricStatus.AVAILABLE:
        return MetricStatus.ACTIVE if live else None
    raise IntegrityViolation(metric_name, status)


@dataclass(slots=True)
class BundleToggle:
    """Status changes applied in memory to one bundle's metrics."""

    enabled: int = 0
    disabled: int = 0

    @property
    def dirty(self) -> bool:
        return bool(self.enabled or self.disabled)


def toggle_allocation_metrics(
    metrics: Iterable[BundleMetric],
    *,
    pattern: re.Pattern[str],
    live_allocation_ids: frozenset[str],
    stats: RunStats,
    label: str = "",
) -> BundleToggle:
    """Flip allocation metrics in place according to allocation liveness."""

    toggle = BundleToggle()
    for metric in metrics:
        allocation_id = extract_allocation_id(pattern, metric.name)
        if allocation_id is None:
            continue

        live = allocation_id in live_allocation_ids
        if live:
            stats.alloc_metrics_active += 1
        else:
            stats.alloc_metrics_available += 1

        new_status = decide_status(metric.name, metric.status, live=live)
        if new_status is None:
            continue

        log.info("toggling metric %r/%r to %s", label, metric.name, new_status)
        metric.status = new_status
        if new_status is MetricStatus.ACTIVE:
            toggle.enabled += 1
            stats.metrics_enable_planned += 1
        else:
            toggle.disabled += 1
            stats.metrics_disable_planned += 1
    return toggle


@dataclass(slots=True)
class AllocationCorrelator:
    """Reconcile allocation metric status for hosts that are Nomad clients.

    Every remote failure here is isolated to the host or bundle it concerns: it is
    logged and the run moves on. Only :class:`IntegrityViolation` escapes.
    """

    monitoring: MonitoringBackend
    orchestrator: Orchestrator
    options: ReconcileOptions

    def correlate_host(self, host: Host, node_id: str, stats: RunStats) -> None:
        log.debug("searching nomad client %r", host)
        try:
            allocations = self.orchestrator.list_allocations(node_id, allow_stale=True)
        except CollaboratorError as exc:
            log.error("unable to find allocations for node %r (host %r): %s", node_id, host, exc)
            return
        live_ids = frozenset(allocation.id.lower() for allocation in allocations)
        stats.live_allocations += len(live_ids)

        try:
            bundles = self.monitoring.find_check_bundles_by_target(
                host, prefix_search=self.options.prefix_search
            )
        except CollaboratorError as exc:
            log.error("unable to find checks for target %r: %s", host, exc)
            return

        pattern = allocation_metric_pattern(host)
        for bundle in bundles:
            self._reconcile_bundle(host, bundle, pattern, live_ids, stats)

    def _reconcile_bundle(
        self,
        host: Host,
        bundle: CheckBundle,
        pattern: re.Pattern[str],
        live_ids: frozenset[str],
        stats: RunStats,
    ) -> None:
        bundle_id = check_bundle_id(bundle.cid)
        if bundle_id is None:
            log.error("unable to extract check bundle ID from %r", bundle.cid)
            return

        metrics_cid = f"{CHECK_BUNDLE_METRICS_PREFIX}/{bundle_id}"
        try:
            bundle_metrics = self.monitoring.fetch_check_bundle_metrics(metrics_cid)
        except CollaboratorError as exc:
            log.error(
                "unable to fetch check bundle metrics for target/cid %r/%r: %s",
                host,
                bundle.cid,
                exc,
            )
            return

        toggle = toggle_allocation_metrics(
            bundle_metrics.metrics,
            pattern=pattern,
            live_allocation_ids=live_ids,
            stats=stats,
            label=metrics_cid,
        )
        if not toggle.dirty:
            return

        if self.options.dry_run:
            log.info(
                "dry-run: about to update %r's check_bundle_metric %r", host, bundle_metrics.cid
            )
            return

        log.info("about to update %r's check_bundle_metric %r", host, bundle_metrics.cid)
        try:
            self.monitoring.update_check_bundle_metrics(bundle_metrics)
        except CollaboratorError as exc:
            log.error(
                "unable to update check bundle metrics for CID %r: %s", bundle_metrics.cid, exc
            )
            return
        stats.metrics_enabled += toggle.enabled
        stats.metrics_disabled += toggle.disabled

"""Silence metrics selected by a free-form monitoring search.

Query mode is an operator action with a narrow scope: the first bundle that cannot
be fetched or updated aborts the run instead of being skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from reaper.domain.errors import CollaboratorError, IntegrityViolation, QueryModeError
from reaper.domain.model import MetricStatus

if TYPE_CHECKING:
    from reaper.domain.model import MetricSearchHit
    from reaper.domain.ports import MonitoringBackend

    from .stats import RunStats

log = getLogger(__name__)

METRIC_SEARCH_PAGE_SIZE = 1000


def group_by_check_bundle(hits: list[MetricSearchHit]) -> dict[str, set[str]]:
    """Map check bundle CID to the names of its matched metrics."""

    grouped: dict[str, set[str]] = {}
    for hit in hits:
        grouped.setdefault(hit.check_bundle_cid, set()).add(hit.metric_name)
    return grouped


@dataclass(slots=True)
class QuerySelector:
    monitoring: MonitoringBackend
    dry_run: bool = False
    page_size: int = METRIC_SEARCH_PAGE_SIZE

    def search(self, query: str) -> list[MetricSearchHit]:
        hits: dict[str, MetricSearchHit] = {}
        offset = 0
        while True:
            filters = {"size": [str(self.page_size)], "from": [str(offset)]}
            try:
                page = self.monitoring.search_metrics(query, filters)
            except CollaboratorError as exc:
                raise QueryModeError(f"unable to search for metrics {query!r}: {exc}") from exc
            new = [hit for hit in page if hit.cid not in hits]
            hits.update((hit.cid, hit) for hit in new)
            if len(page) < self.page_size:
                return list(hits.values())
            if not new:
                # the backend ignored the offset and served a page we already have
                log.warning("metric search %r repeated a page at offset %d", query, offset)
                return list(hits.values())
            offset += len(page)

    def deactivate_matching(self, query: str, stats: RunStats) -> None:
        log.debug("query: %r", query)
        grouped = group_by_check_bundle(self.search(query))
        log.info("query %r matched metrics in %d check bundles", query, len(grouped))

        for bundle_cid, metric_names in grouped.items():
            self._silence_bundle(bundle_cid, metric_names, stats)

    def _silence_bundle(self, bundle_cid: str, metric_names: set[str], stats: RunStats) -> None:
        log.debug("check bundle %r", bundle_cid)
        try:
            bundle = self.monitoring.fetch_check_bundle(bundle_cid)
        except CollaboratorError as exc:
            raise QueryModeError(
                f"unable to fetch check bundle {bundle_cid!r}: {exc}",
                check_bundle_cid=bundle_cid,
            ) from exc

        disabled = 0
        for metric in bundle.metrics:
            if metric.name not in metric_names:
                continue
            if metric.status == MetricStatus.AVAILABLE:
                continue
            if metric.status != MetricStatus.ACTIVE:
                raise IntegrityViolation(metric.name, metric.status)
            log.info("toggling metric %r/%r to available", bundle_cid, metric.name)
            metric.status = MetricStatus.AVAILABLE
            disabled += 1
        stats.metrics_disable_planned += disabled

        if not disabled:
            return
        if self.dry_run:
            log.info("dry-run: about to update check bundle %r", bundle_cid)
            return

        log.info("about to update check bundle %r", bundle_cid)
        try:
            self.monitoring.update_check_bundle(bundle)
        except CollaboratorError as exc:
            raise QueryModeError(
                f"unable to update check bundle {bundle_cid!r}: {exc}",
                check_bundle_cid=bundle_cid,
            ) from exc
        stats.metrics_disabled += disabled

"""Port for the monitoring backend holding check bundles and their metrics.

Implementations raise :class:`reaper.domain.errors.CollaboratorError` (or a
subclass) for every remote failure so the engine can decide whether the failure
is isolated to one item or fatal for the run.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from reaper.domain.model import CheckBundle, CheckBundleMetrics, MetricSearchHit

type SearchFilters = Mapping[str, Sequence[str]]


@runtime_checkable
class MonitoringBackend(Protocol):
    def search_check_bundles(
        self,
        query: str,
        filters: SearchFilters | None = None,
    ) -> list[CheckBundle]: ...

    def search_metrics(
        self,
        query: str,
        filters: SearchFilters | None = None,
    ) -> list[MetricSearchHit]: ...

    def find_check_bundles_by_target(
        self,
        target: str,
        *,
        prefix_search: bool = False,
    ) -> list[CheckBundle]: ...

    def fetch_check_bundle(self, cid: str) -> CheckBundle: ...

    def fetch_check_bundle_metrics(self, cid: str) -> CheckBundleMetrics: ...

    def update_check_bundle(self, bundle: CheckBundle) -> CheckBundle: ...

    def update_check_bundle_metrics(self, bundle_metrics: CheckBundleMetrics) -> None: ...

    def delete_check_bundle(self, bundle: CheckBundle) -> None:
        """Structurally delete ``bundle``; implementations may raise ``NotImplementedError``."""
        ...


__all__ = ["MonitoringBackend", "SearchFilters"]

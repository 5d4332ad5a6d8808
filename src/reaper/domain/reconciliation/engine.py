"""Driver for a reconciliation run.

A run works from one :class:`ReconciliationSnapshot` taken up front, so every
phase sees the same catalog hosts, monitoring targets and Nomad node map. Failures
while taking the snapshot are fatal; failures while acting on single hosts are not.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from reaper.config.errors import ConfigurationError
from reaper.domain.errors import CollaboratorError

from .allocations import AllocationCorrelator
from .options import Mode
from .query import QuerySelector
from .sets import TargetSets, find_sets
from .stats import RunStats

if TYPE_CHECKING:
    from reaper.domain.model import Host
    from reaper.domain.ports import MonitoringBackend, Orchestrator, ServiceCatalog

    from .options import ReconcileOptions

log = getLogger(__name__)

ACTIVE_CHECK_BUNDLES_QUERY = "(active:1)"


@dataclass(slots=True, frozen=True)
class ReconciliationSnapshot:
    catalog_hosts: frozenset[Host]
    monitoring_targets: frozenset[Host]
    node_ids: dict[str, str] = field(default_factory=dict[str, str])

    def target_sets(self) -> TargetSets:
        """``only_a`` is catalog-only, ``only_b`` monitoring-only."""

        return find_sets(self.catalog_hosts, self.monitoring_targets)


@dataclass(slots=True)
class ReconciliationEngine:
    """Run one reconciliation pass in the configured mode and return its statistics."""

    monitoring: MonitoringBackend
    options: ReconcileOptions
    catalog: ServiceCatalog | None = None
    orchestrator: Orchestrator | None = None

    def validate(self) -> None:
        if self.options.mode is Mode.CONSUL_NOMAD:
            if self.catalog is None:
                raise ConfigurationError("Consul client can not be None in consul/nomad mode")
            if self.orchestrator is None:
                raise ConfigurationError("Nomad client can not be None in consul/nomad mode")
        elif self.options.mode is Mode.QUERY:
            if not (self.options.metric_query or "").strip():
                raise ConfigurationError("query mode requires a metric search query")
        else:
            raise ConfigurationError(f"unsupported mode: {self.options.mode!r}")

    def run(self) -> RunStats:
        self.validate()
        stats = RunStats()
        if self.options.dry_run:
            log.info("dry-run: no changes will be made to Circonus")

        if self.options.mode is Mode.QUERY:
            self.deactivate_matching_query(stats)
            return stats

        snapshot = self.take_snapshot()
        stats.orchestrator_clients = len(snapshot.node_ids)
        sets = snapshot.target_sets()
        stats.unknown_hosts = len(sets.only_b)
        stats.shared_hosts = len(sets.both)

        self.deactivate_unknown_hosts(sets.only_b, stats)
        self.deactivate_completed_allocations(sets.both, snapshot, stats)
        return stats

    def take_snapshot(self) -> ReconciliationSnapshot:
        """Read catalog hosts, monitoring targets and the Nomad node map once."""

        catalog, orchestrator = self._require_consul_nomad()
        hosts = catalog.list_hosts(allow_stale=True)
        bundles = self.monitoring.search_check_bundles(ACTIVE_CHECK_BUNDLES_QUERY)
        nodes = orchestrator.list_nodes(allow_stale=True)
        snapshot = ReconciliationSnapshot(
            catalog_hosts=frozenset(hosts),
            monitoring_targets=frozenset(bundle.target for bundle in bundles),
            node_ids={node.name: node.id for node in nodes},
        )
        log.info(
            "snapshot: consul_hosts=%d, circonus_targets=%d, nomad_clients=%d",
            len(snapshot.catalog_hosts),
            len(snapshot.monitoring_targets),
            len(snapshot.node_ids),
        )
        return snapshot

    def deactivate_unknown_hosts(self, hosts: frozenset[Host], stats: RunStats) -> None:
        """Deactivate the check bundles of monitored hosts that Consul no longer knows."""

        exclusions = self.options.exclusions
        for host in sorted(hosts):
            if exclusions.is_excluded(host):
                log.info("skipping check bundle deactivation for excluded target %r", host)
                stats.targets_excluded += 1
                continue

            stats.targets_disable_planned += 1
            log.info("deactivating check bundles for target %r", host)
            try:
                deleted = self.disable_target_checks(host)
            except (CollaboratorError, NotImplementedError) as exc:
                log.error("unable to disable checks on target %r: %s", host, exc)
                continue
            if deleted:
                stats.targets_disabled += 1

    def disable_target_checks(self, target: Host) -> int:
        """Delete the check bundles monitoring exactly ``target``; return how many went.

        A prefix search can also return bundles of other hosts sharing the prefix. Those
        are left alone here: unknown ones get their own pass, live ones must survive.
        """

        bundles = self.monitoring.find_check_bundles_by_target(
            target, prefix_search=self.options.prefix_search
        )
        deleted = 0
        for bundle in bundles:
            if bundle.target != target:
                log.debug("skipping %r %r (not target %r)", bundle.target, bundle.cid, target)
                continue
            if self.options.exclusions.is_excluded(bundle.target):
                log.info("skipping %r %r (excluded target)", bundle.target, bundle.cid)
                continue
            if self.options.dry_run:
                log.info("dry-run: about to delete %r %r", bundle.target, bundle.cid)
                continue
            log.info("about to delete %r %r", bundle.target, bundle.cid)
            self.monitoring.delete_check_bundle(bundle)
            deleted += 1
        return deleted

    def deactivate_completed_allocations(
        self,
        hosts: frozenset[Host],
        snapshot: ReconciliationSnapshot,
        stats: RunStats,
    ) -> None:
        """Toggle allocation metrics for hosts present in both Consul and Circonus."""

        _, orchestrator = self._require_consul_nomad()
        correlator = AllocationCorrelator(
            monitoring=self.monitoring,
            orchestrator=orchestrator,
            options=self.options,
        )
        exclusions = self.options.exclusions
        for host in sorted(hosts):
            node_id = snapshot.node_ids.get(host)
            if node_id is None:
                log.info("ignoring non-nomad client %r", host)
                continue
            if exclusions.is_excluded(host):
                log.info("skipping nomad client %r (excluded target)", host)
                stats.targets_excluded += 1
                continue
            correlator.correlate_host(host, node_id, stats)

    def deactivate_matching_query(self, stats: RunStats) -> None:
        selector = QuerySelector(monitoring=self.monitoring, dry_run=self.options.dry_run)
        selector.deactivate_matching(self.options.metric_query or "", stats)

    def _require_consul_nomad(self) -> tuple[ServiceCatalog, Orchestrator]:
        if self.catalog is None or self.orchestrator is None:
            raise ConfigurationError("consul/nomad phases need both Consul and Nomad clients")
        return self.catalog, self.orchestrator

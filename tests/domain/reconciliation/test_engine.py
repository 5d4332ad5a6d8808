from __future__ import annotations

import logging

import pytest

from reaper.config.errors import ConfigurationError
from reaper.domain.errors import CollaboratorError
from reaper.domain.model import MetricSearchHit
from reaper.domain.reconciliation import (
    ExclusionRules,
    Mode,
    ReconcileOptions,
    ReconciliationEngine,
    RunStats,
)
from tests.support.fakes import (
    ALLOC_1,
    ALLOC_2,
    ALLOC_3,
    FakeCatalog,
    FakeMonitoring,
    FakeOrchestrator,
    alloc_metric_name,
)


def _world() -> tuple[FakeCatalog, FakeMonitoring, FakeOrchestrator]:
    """Consul knows a, b, c; Circonus monitors b, c, d; b and c are Nomad clients."""

    catalog = FakeCatalog(hosts=["a", "b", "c"])
    monitoring = FakeMonitoring()
    monitoring.add_bundle(
        1,
        "b",
        [
            (alloc_metric_name("b", ALLOC_1), "available"),
            (alloc_metric_name("b", ALLOC_2), "active"),
            ("cpu`idle", "active"),
        ],
    )
    monitoring.add_bundle(2, "c", [(alloc_metric_name("c", ALLOC_3), "active")])
    monitoring.add_bundle(3, "d", [("cpu`idle", "active")])
    orchestrator = FakeOrchestrator(
        nodes={"b": "node-b", "c": "node-c"},
        allocations={"node-b": [ALLOC_1], "node-c": [ALLOC_3]},
    )
    return catalog, monitoring, orchestrator


def _engine(
    catalog: FakeCatalog,
    monitoring: FakeMonitoring,
    orchestrator: FakeOrchestrator,
    *,
    dry_run: bool = False,
    exclusions: ExclusionRules | None = None,
) -> ReconciliationEngine:
    options = ReconcileOptions(
        mode=Mode.CONSUL_NOMAD,
        dry_run=dry_run,
        exclusions=exclusions or ExclusionRules(),
    )
    return ReconciliationEngine(
        monitoring=monitoring,
        options=options,
        catalog=catalog,
        orchestrator=orchestrator,
    )


def test_snapshot_partitions_hosts() -> None:
    catalog, monitoring, orchestrator = _world()

    snapshot = _engine(catalog, monitoring, orchestrator).take_snapshot()
    sets = snapshot.target_sets()

    assert sets.only_a == {"a"}
    assert sets.only_b == {"d"}
    assert sets.both == {"b", "c"}
    assert snapshot.node_ids == {"b": "node-b", "c": "node-c"}
    assert catalog.calls == [True]


def test_excluded_unknown_host_is_left_alone() -> None:
    catalog, monitoring, orchestrator = _world()
    engine = _engine(
        catalog,
        monitoring,
        orchestrator,
        exclusions=ExclusionRules.from_strings(["d"], []),
    )

    stats = engine.run()

    assert monitoring.deletes == []
    assert stats.targets_excluded == 1
    assert stats.targets_disable_planned == 0
    assert stats.unknown_hosts == 1
    assert stats.shared_hosts == 2
    assert stats.orchestrator_clients == 2


def test_live_run_toggles_allocation_metrics() -> None:
    catalog, monitoring, orchestrator = _world()

    stats = _engine(catalog, monitoring, orchestrator).run()

    assert monitoring.metric_status(1, alloc_metric_name("b", ALLOC_1)) == "active"
    assert monitoring.metric_status(1, alloc_metric_name("b", ALLOC_2)) == "available"
    assert monitoring.metric_status(1, "cpu`idle") == "active"
    assert monitoring.metric_status(2, alloc_metric_name("c", ALLOC_3)) == "active"
    assert stats.metrics_enabled == 1
    assert stats.metrics_disabled == 1
    assert stats.live_allocations == 2
    assert stats.alloc_metrics_active == 2
    assert stats.alloc_metrics_available == 1
    assert [update.cid for update in monitoring.metric_updates] == ["/check_bundle_metrics/1"]


def test_unknown_host_deactivation_failure_is_isolated() -> None:
    catalog, monitoring, orchestrator = _world()

    stats = _engine(catalog, monitoring, orchestrator).run()

    assert monitoring.deletes == ["/check_bundle/3"]
    assert stats.targets_disable_planned == 1
    assert stats.targets_disabled == 0
    assert stats.metrics_enabled == 1


def test_second_live_run_writes_nothing() -> None:
    catalog, monitoring, orchestrator = _world()
    exclusions = ExclusionRules.from_strings(["d"], [])
    _engine(catalog, monitoring, orchestrator, exclusions=exclusions).run()
    writes_after_first = monitoring.writes

    stats = _engine(catalog, monitoring, orchestrator, exclusions=exclusions).run()

    assert monitoring.writes == writes_after_first
    assert stats.metrics_enable_planned == 0
    assert stats.metrics_disable_planned == 0


def test_dry_run_reads_like_a_live_run_but_writes_nothing() -> None:
    live_world = _world()
    dry_world = _world()

    live = _engine(*live_world).run()
    dry = _engine(*dry_world, dry_run=True).run()

    _, dry_monitoring, _ = dry_world
    assert dry.read_counters() == live.read_counters()
    assert dry_monitoring.writes == 0
    assert (dry.targets_disabled, dry.metrics_enabled, dry.metrics_disabled) == (0, 0, 0)


def test_excluded_shared_host_is_not_correlated() -> None:
    catalog, monitoring, orchestrator = _world()
    engine = _engine(
        catalog,
        monitoring,
        orchestrator,
        exclusions=ExclusionRules.from_strings([], ["^[bd]$"]),
    )

    stats = engine.run()

    assert [update.cid for update in monitoring.metric_updates] == []
    assert stats.targets_excluded == 2
    assert stats.alloc_metrics_active == 1


def test_shared_host_that_is_not_a_nomad_client_is_skipped() -> None:
    catalog, monitoring, orchestrator = _world()
    orchestrator.nodes.pop("b")

    stats = _engine(catalog, monitoring, orchestrator).run()

    assert monitoring.metric_status(1, alloc_metric_name("b", ALLOC_2)) == "active"
    assert stats.orchestrator_clients == 1
    assert stats.live_allocations == 1


def test_failure_on_one_host_does_not_stop_the_others() -> None:
    catalog, monitoring, orchestrator = _world()
    orchestrator.failing_nodes.add("node-b")
    monitoring.add_bundle(4, "c", [(alloc_metric_name("c", ALLOC_1), "active")])

    stats = _engine(catalog, monitoring, orchestrator).run()

    assert monitoring.metric_status(1, alloc_metric_name("b", ALLOC_2)) == "active"
    assert monitoring.metric_status(4, alloc_metric_name("c", ALLOC_1)) == "available"
    assert stats.metrics_disabled == 1


def test_snapshot_failure_is_fatal() -> None:
    catalog, monitoring, orchestrator = _world()
    catalog.fail = True

    with pytest.raises(CollaboratorError):
        _engine(catalog, monitoring, orchestrator).run()

    assert monitoring.writes == 0


def test_disable_target_checks_skips_excluded_bundle_targets() -> None:
    monitoring = FakeMonitoring(supports_delete=True)
    monitoring.add_bundle(1, "web-1", [])
    options = ReconcileOptions(
        mode=Mode.CONSUL_NOMAD,
        exclusions=ExclusionRules.from_strings(["web-1"], []),
    )
    engine = ReconciliationEngine(
        monitoring=monitoring,
        options=options,
        catalog=FakeCatalog(),
        orchestrator=FakeOrchestrator(),
    )

    assert engine.disable_target_checks("web-1") == 0
    assert monitoring.deletes == []


def test_prefix_search_never_deletes_bundles_of_other_hosts() -> None:
    catalog = FakeCatalog(hosts=["web-10"])
    monitoring = FakeMonitoring(supports_delete=True)
    monitoring.add_bundle(1, "web-1", [])
    monitoring.add_bundle(2, "web-10", [])
    options = ReconcileOptions(mode=Mode.CONSUL_NOMAD, prefix_search=True)
    engine = ReconciliationEngine(
        monitoring=monitoring,
        options=options,
        catalog=catalog,
        orchestrator=FakeOrchestrator(),
    )

    stats = engine.run()

    assert monitoring.target_lookups == ["web-1"]
    assert monitoring.deletes == ["/check_bundle/1"]
    assert "/check_bundle/2" in monitoring.bundles
    assert stats.targets_disabled == 1


def test_dry_run_looks_up_the_same_targets_as_a_live_run(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="reaper")
    live_world = _world()
    dry_world = _world()

    _engine(*live_world).run()
    _engine(*dry_world, dry_run=True).run()

    _, live_monitoring, _ = live_world
    _, dry_monitoring, _ = dry_world
    assert dry_monitoring.target_lookups == live_monitoring.target_lookups
    assert "d" in dry_monitoring.target_lookups
    assert dry_monitoring.deletes == []
    assert "dry-run: about to delete 'd' '/check_bundle/3'" in caplog.text


def test_targets_disabled_counts_only_hosts_with_deletions() -> None:
    monitoring = FakeMonitoring(supports_delete=True)
    monitoring.add_bundle(1, "gone-1", [])
    engine = ReconciliationEngine(
        monitoring=monitoring,
        options=ReconcileOptions(mode=Mode.CONSUL_NOMAD),
        catalog=FakeCatalog(),
        orchestrator=FakeOrchestrator(),
    )
    stats = RunStats()

    engine.deactivate_unknown_hosts(frozenset({"gone-1", "vanished"}), stats)

    assert monitoring.deletes == ["/check_bundle/1"]
    assert stats.targets_disable_planned == 2
    assert stats.targets_disabled == 1


def test_validate_requires_consul_and_nomad_clients() -> None:
    engine = ReconciliationEngine(
        monitoring=FakeMonitoring(),
        options=ReconcileOptions(mode=Mode.CONSUL_NOMAD),
        catalog=FakeCatalog(),
    )

    with pytest.raises(ConfigurationError, match="Nomad"):
        engine.validate()


def test_validate_requires_query_in_query_mode() -> None:
    engine = ReconciliationEngine(
        monitoring=FakeMonitoring(),
        options=ReconcileOptions(mode=Mode.QUERY, metric_query="  "),
    )

    with pytest.raises(ConfigurationError, match="query"):
        engine.run()


def test_query_mode_does_not_need_consul_or_nomad() -> None:
    monitoring = FakeMonitoring()
    monitoring.add_bundle(1, "web-1", [("cpu`idle", "active")])
    monitoring.metric_hits = [
        MetricSearchHit(
            cid="/metric/1_cpu`idle",
            check_bundle_cid="/check_bundle/1",
            metric_name="cpu`idle",
        )
    ]
    engine = ReconciliationEngine(
        monitoring=monitoring,
        options=ReconcileOptions(mode=Mode.QUERY, metric_query="(metric_name:cpu*)"),
    )

    stats = engine.run()

    assert monitoring.bundle_metric_status(1, "cpu`idle") == "available"
    assert stats.metrics_disabled == 1
    assert stats.unknown_hosts == 0

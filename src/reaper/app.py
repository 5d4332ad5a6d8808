"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from reaper.adapters.circonus import CirconusClient
from reaper.adapters.consul import ConsulCatalogClient
from reaper.adapters.nomad import NomadClient
from reaper.config import get_circonus_config, get_consul_config, get_nomad_config
from reaper.domain.reconciliation import Mode, ReconciliationEngine

if TYPE_CHECKING:
    from reaper.config import CirconusConfig, ConsulConfig, NomadConfig
    from reaper.domain.ports import MonitoringBackend, Orchestrator, ServiceCatalog
    from reaper.domain.reconciliation import ReconcileOptions, RunStats


log = getLogger(__name__)


def build_engine(
    options: ReconcileOptions,
    *,
    circonus: CirconusConfig | None = None,
    consul: ConsulConfig | None = None,
    nomad: NomadConfig | None = None,
    monitoring: MonitoringBackend | None = None,
    catalog: ServiceCatalog | None = None,
    orchestrator: Orchestrator | None = None,
) -> ReconciliationEngine:
    """Wire the engine with explicit ports or clients built from configuration."""

    effective_monitoring = monitoring or CirconusClient(config=circonus or get_circonus_config())
    if options.mode is Mode.CONSUL_NOMAD:
        catalog = catalog or ConsulCatalogClient(config=consul or get_consul_config())
        orchestrator = orchestrator or NomadClient(config=nomad or get_nomad_config())

    engine = ReconciliationEngine(
        monitoring=effective_monitoring,
        options=options,
        catalog=catalog,
        orchestrator=orchestrator,
    )
    engine.validate()
    return engine


def reap_metrics(
    options: ReconcileOptions,
    *,
    circonus: CirconusConfig | None = None,
    consul: ConsulConfig | None = None,
    nomad: NomadConfig | None = None,
    monitoring: MonitoringBackend | None = None,
    catalog: ServiceCatalog | None = None,
    orchestrator: Orchestrator | None = None,
) -> RunStats:
    """Run one reconciliation pass using the configured adapters."""

    engine = build_engine(
        options,
        circonus=circonus,
        consul=consul,
        nomad=nomad,
        monitoring=monitoring,
        catalog=catalog,
        orchestrator=orchestrator,
    )
    log.info(
        "Starting reconciliation: mode=%s, dry_run=%s, prefix_search=%s",
        options.mode,
        options.dry_run,
        options.prefix_search,
    )

    stats = engine.run()

    log.info(
        f"Finished reconciliation: targets_disabled={stats.targets_disabled}, "
        f"metrics_disabled={stats.metrics_disabled}, metrics_enabled={stats.metrics_enabled}, "
        f"targets_excluded={stats.targets_excluded}"
    )
    return stats

"""Run statistics accumulated by the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class RunStats:
    """Counters for one run.

    The ``*_planned`` and observation counters depend only on what was read, so a
    dry run and a live run over the same remote state agree on them. ``targets_disabled``,
    ``metrics_enabled`` and ``metrics_disabled`` only move after a successful remote
    write and therefore stay at zero in a dry run.
    """

    targets_excluded: int = 0
    targets_disable_planned: int = 0
    targets_disabled: int = 0

    metrics_enable_planned: int = 0
    metrics_disable_planned: int = 0
    metrics_enabled: int = 0
    metrics_disabled: int = 0

    live_allocations: int = 0
    alloc_metrics_active: int = 0
    alloc_metrics_available: int = 0

    orchestrator_clients: int = 0
    unknown_hosts: int = 0
    shared_hosts: int = 0

    def read_counters(self) -> dict[str, int]:
        """Counters that must not depend on whether writes were issued."""

        return {
            "targets_excluded": self.targets_excluded,
            "targets_disable_planned": self.targets_disable_planned,
            "metrics_enable_planned": self.metrics_enable_planned,
            "metrics_disable_planned": self.metrics_disable_planned,
            "live_allocations": self.live_allocations,
            "alloc_metrics_active": self.alloc_metrics_active,
            "alloc_metrics_available": self.alloc_metrics_available,
            "orchestrator_clients": self.orchestrator_clients,
            "unknown_hosts": self.unknown_hosts,
            "shared_hosts": self.shared_hosts,
        }

"""Human-readable run summary."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from reaper.domain.reconciliation import RunStats


def columnize(rows: Sequence[tuple[str, object]], *, gap: int = 2) -> str:
    """Render ``rows`` as two left-aligned columns."""

    if not rows:
        return ""
    width = max(len(label) for label, _ in rows)
    return "\n".join(f"{label.ljust(width + gap)}{value}" for label, value in rows)


def summary_rows(stats: RunStats, *, dry_run: bool) -> list[tuple[str, object]]:
    mode = "dry-run" if dry_run else "live"
    return [
        ("Excluded Targets", stats.targets_excluded),
        (f"Targets to Disable {mode}", stats.targets_disable_planned),
        (f"Disabled Targets {mode}", stats.targets_disabled),
        (f"Metrics to Disable {mode}", stats.metrics_disable_planned),
        (f"Disabled Metrics {mode}", stats.metrics_disabled),
        (f"Metrics to Enable {mode}", stats.metrics_enable_planned),
        (f"Enabled Metrics {mode}", stats.metrics_enabled),
        ("Number of non-Consul Hosts", stats.unknown_hosts),
        ("Number of Circonus and Consul Hosts", stats.shared_hosts),
        ("Number of Nomad Clients", stats.orchestrator_clients),
        ("Number of live allocs", stats.live_allocations),
        ("Number of active nomad alloc metrics", stats.alloc_metrics_active),
        ("Number of available nomad alloc metrics", stats.alloc_metrics_available),
    ]


def format_summary(stats: RunStats, *, dry_run: bool) -> str:
    return "Summary:\n" + columnize(summary_rows(stats, dry_run=dry_run))

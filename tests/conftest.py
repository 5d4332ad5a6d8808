from __future__ import annotations

import pytest

from reaper.domain.reconciliation import Mode, ReconcileOptions
from tests.support.fakes import FakeCatalog, FakeMonitoring, FakeOrchestrator


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("CIRCONUS_API_KEY", "CIRCONUS_API_URL", "CONSUL_HTTP_ADDR", "NOMAD_ADDR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def orchestrator() -> FakeOrchestrator:
    return FakeOrchestrator()


@pytest.fixture
def monitoring() -> FakeMonitoring:
    return FakeMonitoring()


@pytest.fixture
def live_options() -> ReconcileOptions:
    return ReconcileOptions(mode=Mode.CONSUL_NOMAD)


@pytest.fixture
def dry_run_options() -> ReconcileOptions:
    return ReconcileOptions(mode=Mode.CONSUL_NOMAD, dry_run=True)


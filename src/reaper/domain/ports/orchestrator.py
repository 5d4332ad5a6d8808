"""Port for the orchestrator that owns allocations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from reaper.domain.model import Allocation, OrchestratorNode


@runtime_checkable
class Orchestrator(Protocol):
    def list_nodes(self, *, allow_stale: bool = True) -> list[OrchestratorNode]: ...

    def list_allocations(
        self,
        node_id: str,
        *,
        allow_stale: bool = True,
    ) -> list[Allocation]: ...


__all__ = ["Orchestrator"]

"""HTTP client for the Nomad nodes API."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
from pydantic import TypeAdapter, ValidationError

from reaper.adapters.http_resilience import ResilientClient
from reaper.domain.errors import CollaboratorError
from reaper.domain.model import Allocation, OrchestratorNode

from .schema import AllocationListStubPayload, NodeListStubPayload

if TYPE_CHECKING:
    from collections.abc import Callable

    from reaper.config.http_resilience import ResilienceConfig
    from reaper.config.nomad import NomadConfig
    from reaper.domain.ports import Orchestrator

_NODE_LIST = TypeAdapter(list[NodeListStubPayload])
_ALLOCATION_LIST = TypeAdapter(list[AllocationListStubPayload])


class NomadAPIError(CollaboratorError):
    """Raised when the Nomad agent cannot be queried."""


class NomadClient:
    """Orchestrator port backed by the Nomad HTTP API."""

    def __init__(
        self,
        *,
        config: NomadConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def list_nodes(self, *, allow_stale: bool = True) -> list[OrchestratorNode]:
        payload = asyncio.run(self._get_async("/v1/nodes", allow_stale=allow_stale))
        nodes = self._validate(_NODE_LIST, payload, what="nodes")
        return [OrchestratorNode(name=node.name, id=node.id) for node in nodes]

    def list_allocations(self, node_id: str, *, allow_stale: bool = True) -> list[Allocation]:
        path = f"/v1/node/{node_id}/allocations"
        payload = asyncio.run(self._get_async(path, allow_stale=allow_stale))
        allocations = self._validate(_ALLOCATION_LIST, payload, what="allocations")
        return [
            Allocation(id=allocation.id, client_status=allocation.client_status)
            for allocation in allocations
        ]

    async def _get_async(self, path: str, *, allow_stale: bool) -> object:
        params = {"stale": ""} if allow_stale else None
        async with self._client_factory(self._resilience) as client:
            try:
                response = await client.get(path, params=params)
                response.raise_for_status()
                return response.json()
            except (httpx.HTTPError, ValueError) as exc:
                raise NomadAPIError(f"unable to query nomad {path}: {exc}") from exc

    @staticmethod
    def _validate[T](adapter: TypeAdapter[T], payload: object, *, what: str) -> T:
        try:
            return adapter.validate_python(payload)
        except ValidationError as exc:
            raise NomadAPIError(f"Unexpected Nomad {what} payload: {exc}") from exc


if TYPE_CHECKING:
    from reaper.config.nomad import get_nomad_config

    _orchestrator_check: Orchestrator = NomadClient(config=get_nomad_config())

"""HTTP client for the Consul catalog API."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
from pydantic import TypeAdapter, ValidationError

from reaper.adapters.http_resilience import ResilientClient
from reaper.domain.errors import CollaboratorError

from .schema import CatalogNodePayload

if TYPE_CHECKING:
    from collections.abc import Callable

    from reaper.config.consul import ConsulConfig
    from reaper.config.http_resilience import ResilienceConfig
    from reaper.domain.ports import ServiceCatalog

_CATALOG_NODES = TypeAdapter(list[CatalogNodePayload])


class ConsulAPIError(CollaboratorError):
    """Raised when the Consul agent cannot be queried."""


class ConsulCatalogClient:
    """Service catalog port listing Consul catalog nodes as hosts."""

    def __init__(
        self,
        *,
        config: ConsulConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def list_hosts(self, *, allow_stale: bool = True) -> list[str]:
        nodes = asyncio.run(self._list_nodes_async(allow_stale=allow_stale))
        return [node.node for node in nodes]

    async def _list_nodes_async(self, *, allow_stale: bool) -> list[CatalogNodePayload]:
        params = {"stale": ""} if allow_stale else None
        async with self._client_factory(self._resilience) as client:
            try:
                response = await client.get("/v1/catalog/nodes", params=params)
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as exc:
                raise ConsulAPIError(f"unable to query consul catalog nodes: {exc}") from exc

        try:
            return _CATALOG_NODES.validate_python(payload)
        except ValidationError as exc:
            raise ConsulAPIError(f"Unexpected Consul catalog payload: {exc}") from exc


if TYPE_CHECKING:
    from reaper.config.consul import get_consul_config

    _catalog_check: ServiceCatalog = ConsulCatalogClient(config=get_consul_config())

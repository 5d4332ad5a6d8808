"""HTTP client for the Circonus API v2."""

from __future__ import annotations

import asyncio
import json
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import TypeAdapter, ValidationError

from reaper.adapters.http_resilience import ResilientClient
from reaper.domain.errors import CollaboratorError

from .schema import CheckBundleMetricsPayload, CheckBundlePayload, MetricSearchPayload
from .translator import (
    dump_check_bundle,
    dump_check_bundle_metrics,
    parse_check_bundle,
    parse_check_bundle_metrics,
    parse_metric_search_hit,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from reaper.config.circonus import CirconusConfig
    from reaper.config.http_resilience import ResilienceConfig
    from reaper.domain.model import CheckBundle, CheckBundleMetrics, MetricSearchHit
    from reaper.domain.ports import SearchFilters

log = getLogger(__name__)

CHECK_BUNDLE_PREFIX = "/check_bundle"
METRIC_PREFIX = "/metric"
TARGET_SEARCH_PAGE_SIZE = 1000

_CHECK_BUNDLE = TypeAdapter(CheckBundlePayload)
_CHECK_BUNDLE_LIST = TypeAdapter(list[CheckBundlePayload])
_CHECK_BUNDLE_METRICS = TypeAdapter(CheckBundleMetricsPayload)
_METRIC_SEARCH_LIST = TypeAdapter(list[MetricSearchPayload])

type QueryParams = dict[str, str | list[str]]


class CirconusAPIError(CollaboratorError):
    """Raised when a Circonus API call fails or returns an unexpected payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def target_search_query(target: str, *, prefix_search: bool = False) -> str:
    """Search expression for active check bundles of ``target``."""

    if prefix_search:
        target = f"{target}*"
    return f"(active:1)(host:{json.dumps(target)})"


def _search_params(query: str, filters: SearchFilters | None) -> QueryParams:
    params: QueryParams = {}
    if query:
        params["search"] = query
    for key, values in (filters or {}).items():
        params[key] = list(values)
    return params


class CirconusClient:
    """Monitoring backend port backed by the Circonus REST API."""

    def __init__(
        self,
        *,
        config: CirconusConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def get(self, path: str, *, params: QueryParams | None = None) -> object:
        """Raw GET returning the decoded JSON body."""

        return asyncio.run(self._request_async("GET", path, params=params))

    def search_check_bundles(
        self,
        query: str,
        filters: SearchFilters | None = None,
    ) -> list[CheckBundle]:
        payload = self.get(CHECK_BUNDLE_PREFIX, params=_search_params(query, filters))
        return [parse_check_bundle(item) for item in self._validate(_CHECK_BUNDLE_LIST, payload)]

    def search_metrics(
        self,
        query: str,
        filters: SearchFilters | None = None,
    ) -> list[MetricSearchHit]:
        payload = self.get(METRIC_PREFIX, params=_search_params(query, filters))
        return [
            parse_metric_search_hit(item) for item in self._validate(_METRIC_SEARCH_LIST, payload)
        ]

    def find_check_bundles_by_target(
        self,
        target: str,
        *,
        prefix_search: bool = False,
    ) -> list[CheckBundle]:
        params: QueryParams = {
            "search": target_search_query(target, prefix_search=prefix_search),
            "size": str(TARGET_SEARCH_PAGE_SIZE),
        }
        payload = self.get(CHECK_BUNDLE_PREFIX, params=params)
        return [parse_check_bundle(item) for item in self._validate(_CHECK_BUNDLE_LIST, payload)]

    def fetch_check_bundle(self, cid: str) -> CheckBundle:
        payload = self.get(cid)
        return parse_check_bundle(self._validate(_CHECK_BUNDLE, payload))

    def fetch_check_bundle_metrics(self, cid: str) -> CheckBundleMetrics:
        payload = self.get(cid)
        return parse_check_bundle_metrics(self._validate(_CHECK_BUNDLE_METRICS, payload))

    def update_check_bundle(self, bundle: CheckBundle) -> CheckBundle:
        payload = asyncio.run(
            self._request_async("PUT", bundle.cid, body=dump_check_bundle(bundle))
        )
        return parse_check_bundle(self._validate(_CHECK_BUNDLE, payload))

    def update_check_bundle_metrics(self, bundle_metrics: CheckBundleMetrics) -> None:
        asyncio.run(
            self._request_async(
                "PUT",
                bundle_metrics.cid,
                body=dump_check_bundle_metrics(bundle_metrics),
            )
        )

    def delete_check_bundle(self, bundle: CheckBundle) -> None:
        raise NotImplementedError(f"deleting check bundle {bundle.cid!r} is not implemented")

    async def _request_async(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None = None,
        body: dict[str, object] | None = None,
    ) -> object:
        if self._resilience.base_url is None:
            raise CirconusAPIError("Missing Circonus base_url in resilience configuration")
        async with self._client_factory(self._resilience) as client:
            return await self._perform_request(
                client=client,
                method=method,
                path=path,
                params=params,
                body=body,
            )

    async def _perform_request(
        self,
        *,
        client: ResilientClient,
        method: str,
        path: str,
        params: QueryParams | None,
        body: dict[str, object] | None,
    ) -> object:
        try:
            if body is None:
                response = await client.request(method, path, params=params)
            else:
                response = await client.request(method, path, params=params, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            log.debug("Circonus %s %s failed: %s", method, path, exc.response.text)
            raise CirconusAPIError(
                f"Circonus {method} {path} returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise CirconusAPIError(f"Circonus {method} {path} failed: {exc}") from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise CirconusAPIError(f"Circonus {method} {path} returned invalid JSON") from exc

    @staticmethod
    def _validate[T](adapter: TypeAdapter[T], payload: object) -> T:
        try:
            return adapter.validate_python(payload)
        except ValidationError as exc:
            raise CirconusAPIError(f"Unexpected Circonus response payload: {exc}") from exc

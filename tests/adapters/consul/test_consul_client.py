from __future__ import annotations

import httpx
import pytest

from reaper.adapters.consul import ConsulAPIError, ConsulCatalogClient
from reaper.config import get_consul_config
from tests.support.http import Handler, make_client_factory, recording_handler


def _client(handler: Handler) -> ConsulCatalogClient:
    config = get_consul_config(address="consul.test:8500")
    return ConsulCatalogClient(config=config, client_factory=make_client_factory(handler))


def test_list_hosts_reads_catalog_node_names() -> None:
    nodes = [
        {"ID": "a1", "Node": "web-1", "Address": "10.0.0.1", "Datacenter": "dc1"},
        {"ID": "a2", "Node": "web-2", "Address": "10.0.0.2", "Datacenter": "dc1"},
    ]
    handler, seen = recording_handler(lambda _: httpx.Response(200, json=nodes))

    hosts = _client(handler).list_hosts()

    assert hosts == ["web-1", "web-2"]
    assert str(seen[0].url).startswith("http://consul.test:8500/v1/catalog/nodes")
    assert "stale" in seen[0].url.params


def test_list_hosts_without_stale_reads() -> None:
    handler, seen = recording_handler(lambda _: httpx.Response(200, json=[]))

    assert _client(handler).list_hosts(allow_stale=False) == []
    assert "stale" not in seen[0].url.params


def test_list_hosts_wraps_http_errors() -> None:
    handler, _ = recording_handler(lambda _: httpx.Response(500, text="leader unknown"))

    with pytest.raises(ConsulAPIError, match="consul catalog nodes"):
        _client(handler).list_hosts()


def test_list_hosts_rejects_malformed_payload() -> None:
    handler, _ = recording_handler(lambda _: httpx.Response(200, json=[{"Address": "10.0.0.1"}]))

    with pytest.raises(ConsulAPIError, match="Unexpected Consul catalog payload"):
        _client(handler).list_hosts()

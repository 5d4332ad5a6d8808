"""Consul agent configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import resolve_setting
from .http_resilience import ResilienceConfig, agent_resilience

DEFAULT_CONSUL_ADDR = "127.0.0.1:8500"


@dataclass(frozen=True, slots=True)
class ConsulConfig:
    address: str
    resilience: ResilienceConfig


def normalize_address(address: str) -> str:
    """Return ``address`` as a base URL, defaulting to plain HTTP like the agent CLIs do."""

    address = address.strip().rstrip("/")
    if "://" not in address:
        address = f"http://{address}"
    return address


def get_consul_config(*, address: str | None = None) -> ConsulConfig:
    base_url = normalize_address(resolve_setting(address, "CONSUL_HTTP_ADDR", DEFAULT_CONSUL_ADDR))
    return ConsulConfig(address=base_url, resilience=agent_resilience("consul", base_url))

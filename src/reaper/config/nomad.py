"""Nomad agent configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .consul import normalize_address
from .env import resolve_setting
from .http_resilience import ResilienceConfig, agent_resilience

DEFAULT_NOMAD_ADDR = "http://127.0.0.1:4646"


@dataclass(frozen=True, slots=True)
class NomadConfig:
    address: str
    resilience: ResilienceConfig


def get_nomad_config(*, address: str | None = None) -> NomadConfig:
    base_url = normalize_address(resolve_setting(address, "NOMAD_ADDR", DEFAULT_NOMAD_ADDR))
    return NomadConfig(address=base_url, resilience=agent_resilience("nomad", base_url))

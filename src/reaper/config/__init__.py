"""Application configuration helpers."""

from __future__ import annotations

from .circonus import CirconusConfig, get_circonus_config
from .consul import ConsulConfig, get_consul_config, normalize_address
from .env import env_value, require_setting, resolve_setting
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy, agent_resilience
from .logging import configure_logging
from .nomad import NomadConfig, get_nomad_config

__all__ = [
    "CirconusConfig",
    "ConfigurationError",
    "ConsulConfig",
    "MissingConfigurationError",
    "NomadConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "agent_resilience",
    "configure_logging",
    "env_value",
    "get_circonus_config",
    "get_consul_config",
    "get_nomad_config",
    "normalize_address",
    "require_setting",
    "resolve_setting",
]

"""Circonus API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_setting, resolve_setting
from .http_resilience import JSON_HEADERS, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_CIRCONUS_API_URL = "https://api.circonus.com/v2"
DEFAULT_CIRCONUS_APP_NAME = "reaper"
CIRCONUS_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class CirconusConfig:
    """Holds Circonus API credentials and client settings."""

    api_key: str
    app_name: str
    resilience: ResilienceConfig


def get_circonus_config(
    *,
    api_key: str | None = None,
    app_name: str | None = None,
    api_url: str | None = None,
) -> CirconusConfig:
    """Build the Circonus configuration, preferring explicit values over the environment."""

    key = require_setting(api_key, "CIRCONUS_API_KEY", flag="--circonus-api-key")
    effective_app_name = (app_name or "").strip() or DEFAULT_CIRCONUS_APP_NAME
    base_url = resolve_setting(api_url, "CIRCONUS_API_URL", DEFAULT_CIRCONUS_API_URL).rstrip("/")

    resilience = ResilienceConfig(
        name="circonus",
        base_url=base_url,
        timeout_seconds=CIRCONUS_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        retry=RetryPolicy(total=4),
        default_headers={
            **JSON_HEADERS,
            "X-Circonus-Auth-Token": key,
            "X-Circonus-App-Name": effective_app_name,
        },
    )
    return CirconusConfig(api_key=key, app_name=effective_app_name, resilience=resilience)

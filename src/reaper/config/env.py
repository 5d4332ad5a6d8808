"""Resolve settings from command-line values, the environment and defaults."""

from __future__ import annotations

import os

from .errors import MissingConfigurationError


def env_value(name: str) -> str | None:
    """Stripped value of ``name``; unset and blank variables both read as ``None``."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _explicit(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


def resolve_setting(explicit: str | None, env_name: str, default: str) -> str:
    """First non-blank of ``explicit``, ``$env_name`` and ``default``."""

    return _explicit(explicit) or env_value(env_name) or default


def require_setting(explicit: str | None, env_name: str, *, flag: str) -> str:
    """Like :func:`resolve_setting` without a default; raise when neither source is set."""

    value = _explicit(explicit) or env_value(env_name)
    if value is None:
        raise MissingConfigurationError(f"Missing configuration for: {env_name} (or pass {flag})")
    return value

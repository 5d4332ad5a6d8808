"""Run options selected once at startup."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from reaper.config.errors import ConfigurationError

from .exclusion import ExclusionRules


class Mode(StrEnum):
    QUERY = "query"
    CONSUL_NOMAD = "consul/nomad"

    @classmethod
    def parse(cls, value: str) -> Mode:
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"unknown mode: {value!r}") from None


@dataclass(slots=True, frozen=True)
class ReconcileOptions:
    mode: Mode
    dry_run: bool = False
    exclusions: ExclusionRules = field(default_factory=ExclusionRules)
    metric_query: str | None = None
    prefix_search: bool = False

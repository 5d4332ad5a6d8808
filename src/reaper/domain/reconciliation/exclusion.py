"""Target exclusion rules consulted before any destructive action."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from reaper.config.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(slots=True, frozen=True)
class ExclusionRules:
    targets: frozenset[str] = frozenset()
    patterns: tuple[re.Pattern[str], ...] = field(default_factory=tuple)

    @classmethod
    def from_strings(
        cls,
        targets: Iterable[str] = (),
        regexps: Iterable[str] = (),
    ) -> ExclusionRules:
        """Compile ``regexps``; a malformed pattern is a configuration error."""

        compiled: list[re.Pattern[str]] = []
        for expression in regexps:
            try:
                compiled.append(re.compile(expression))
            except re.error as exc:
                raise ConfigurationError(
                    f"unable to compile exclusion regexp {expression!r}: {exc}"
                ) from exc
        return cls(targets=frozenset(targets), patterns=tuple(compiled))

    def is_excluded(self, host: str) -> bool:
        if host in self.targets:
            return True
        return any(pattern.search(host) for pattern in self.patterns)

    def __bool__(self) -> bool:
        return bool(self.targets or self.patterns)

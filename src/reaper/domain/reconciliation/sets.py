"""Set arithmetic over host collections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(slots=True, frozen=True)
class TargetSets:
    """Partition of two host collections; the three fields are pairwise disjoint."""

    only_a: frozenset[str]
    only_b: frozenset[str]
    both: frozenset[str]

    def union(self) -> frozenset[str]:
        return self.only_a | self.only_b | self.both


def find_sets(a: Iterable[str], b: Iterable[str]) -> TargetSets:
    """Split ``a`` and ``b`` into members only in ``a``, only in ``b`` and in both.

    Duplicates are ignored and no ordering is implied by the result.
    """

    set_a = frozenset(a)
    set_b = frozenset(b)
    return TargetSets(
        only_a=set_a - set_b,
        only_b=set_b - set_a,
        both=set_a & set_b,
    )

from __future__ import annotations

from reaper.domain.reconciliation import find_sets


def test_find_sets_partitions_catalog_and_monitoring_hosts() -> None:
    sets = find_sets(["a", "b", "c"], ["b", "c", "d"])

    assert sets.only_a == {"a"}
    assert sets.only_b == {"d"}
    assert sets.both == {"b", "c"}


def test_find_sets_covers_deduplicated_union_with_disjoint_groups() -> None:
    a = ["x", "y", "y", "z", "shared", "shared"]
    b = ["shared", "w", "w", "z"]

    sets = find_sets(a, b)

    assert sets.union() == set(a) | set(b)
    assert not sets.only_a & sets.only_b
    assert not sets.only_a & sets.both
    assert not sets.only_b & sets.both


def test_find_sets_of_identical_collections_is_all_shared() -> None:
    hosts = ["h1", "h2", "h1"]

    sets = find_sets(hosts, hosts)

    assert sets.only_a == frozenset()
    assert sets.only_b == frozenset()
    assert sets.both == {"h1", "h2"}


def test_find_sets_is_case_sensitive() -> None:
    sets = find_sets(["Host"], ["host"])

    assert sets.only_a == {"Host"}
    assert sets.only_b == {"host"}
    assert sets.both == frozenset()


def test_find_sets_accepts_empty_inputs() -> None:
    sets = find_sets([], iter(()))

    assert sets.union() == frozenset()

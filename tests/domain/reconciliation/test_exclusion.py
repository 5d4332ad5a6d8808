from __future__ import annotations

import pytest

from reaper.config.errors import ConfigurationError
from reaper.domain.reconciliation import ExclusionRules


def test_exact_match_is_excluded_regardless_of_patterns() -> None:
    rules = ExclusionRules.from_strings(["db-1.example.com"], [r"^never-matches$"])

    assert rules.is_excluded("db-1.example.com")


def test_any_matching_pattern_excludes() -> None:
    rules = ExclusionRules.from_strings([], [r"^bastion", r"\.staging\."])

    assert rules.is_excluded("bastion-01")
    assert rules.is_excluded("web-3.staging.example.com")


def test_patterns_use_search_semantics() -> None:
    rules = ExclusionRules.from_strings([], [r"canary"])

    assert rules.is_excluded("web-canary-7")


def test_host_matching_neither_rule_is_not_excluded() -> None:
    rules = ExclusionRules.from_strings(["db-1"], [r"^bastion"])

    assert not rules.is_excluded("web-1")


def test_exact_match_does_not_match_substrings() -> None:
    rules = ExclusionRules.from_strings(["db-1"])

    assert not rules.is_excluded("db-10")


def test_empty_rules_exclude_nothing() -> None:
    rules = ExclusionRules()

    assert not rules
    assert not rules.is_excluded("anything")


def test_malformed_pattern_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="unable to compile exclusion regexp"):
        ExclusionRules.from_strings([], ["web-(["])

"""Tests for changegen.classifier."""

from __future__ import annotations

import pytest

from changegen.classifier import Classification, categorize_commit, classify, is_breaking_change
from changegen.models import CommitType


@pytest.mark.parametrize(
    ("summary", "expected"),
    [
        ("add: new endpoint", CommitType.ADD),
        ("feat: support tags", CommitType.FEAT),
        ("Refactor: split module", CommitType.REFACTOR),
        ("DEPRECATED: old flag", CommitType.DEPRECATED),
        ("fix(core): null check", CommitType.FIX),
        ("docs(readme)!: rewrite", CommitType.DOCS),
        ("test: cover parser", CommitType.TEST),
        ("perf!: faster walk", CommitType.PERF),
    ],
)
def test_categorize_known_prefixes(summary: str, expected: CommitType) -> None:
    assert categorize_commit(summary) is expected


@pytest.mark.parametrize(
    "summary",
    ["initial commit", "chore: bump deps", "ci(actions): cache", ": empty prefix", "feature: typo"],
)
def test_categorize_drops_unknown_or_missing_prefix(summary: str) -> None:
    assert categorize_commit(summary) is None
    assert classify(summary) is None


def test_breaking_marker_must_precede_first_colon() -> None:
    assert is_breaking_change("feat!: drop python 3.8")
    assert is_breaking_change("fix(api)!: rename field")
    assert not is_breaking_change("feat: shout! loudly")
    assert not is_breaking_change("feat: note: a!: b")
    assert not is_breaking_change("no colon here!")


def test_breaking_detection_is_independent_of_category() -> None:
    assert is_breaking_change("chore!: drop support")
    assert classify("chore!: drop support") is None


def test_classify_returns_type_and_flag() -> None:
    assert classify("Feat(ui)!: new layout") == Classification(CommitType.FEAT, True)
    assert classify("fix: typo") == Classification(CommitType.FIX, False)


def test_scope_containing_bang_is_not_breaking() -> None:
    # only the character right before ':' counts
    assert classify("fix(a!b): thing") == Classification(CommitType.FIX, False)

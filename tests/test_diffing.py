"""Tests for changegen.diffing."""

from __future__ import annotations

from changegen.diffing import filter_new_entries, flatten_entries
from changegen.models import CommitType, ParsedSection, SectionData


def _existing() -> list[ParsedSection]:
    newer = ParsedSection(name="src/core", date="2026-02-01")
    newer.add(CommitType.FEAT, "feat!: breaking old by A")
    older = ParsedSection(name="All Changes", date="2026-01-01")
    older.add(CommitType.FIX, "fix: old bug by B")
    older.add(CommitType.DOCS, "docs: old docs by C")
    return [newer, older]


def test_flatten_collects_entries_across_sections_and_categories() -> None:
    assert flatten_entries(_existing()) == {
        "feat!: breaking old by A",
        "fix: old bug by B",
        "docs: old docs by C",
    }
    assert flatten_entries([]) == set()


def test_filter_removes_entries_recorded_in_any_section() -> None:
    current = SectionData(has_breaking_change=True)
    current.add(CommitType.FEAT, "feat!: breaking old by A")
    current.add(CommitType.FEAT, "feat: brand new by D")
    current.add(CommitType.FIX, "fix: old bug by B")

    fresh = filter_new_entries(current, flatten_entries(_existing()))

    assert fresh.entries == {CommitType.FEAT: {"feat: brand new by D"}}
    assert fresh.categories() == {CommitType.FEAT}


def test_filter_recomputes_breaking_flag_from_survivors() -> None:
    current = SectionData(has_breaking_change=True)
    current.add(CommitType.FEAT, "feat!: breaking old by A")
    current.add(CommitType.DOCS, "docs: new page by E")

    fresh = filter_new_entries(current, flatten_entries(_existing()))

    assert fresh.has_breaking_change is False
    assert fresh.entries == {CommitType.DOCS: {"docs: new page by E"}}


def test_filter_keeps_breaking_flag_for_new_breaking_entries() -> None:
    current = SectionData()
    current.add(CommitType.FIX, "fix(api)!: rename field by F")

    fresh = filter_new_entries(current, set())

    assert fresh.has_breaking_change is True


def test_filter_matches_exact_text_only() -> None:
    current = SectionData()
    current.add(CommitType.FIX, "fix: old bug by B ")
    current.add(CommitType.FIX, "Fix: old bug by B")

    fresh = filter_new_entries(current, flatten_entries(_existing()))

    assert fresh.entries[CommitType.FIX] == {"fix: old bug by B ", "Fix: old bug by B"}


def test_filter_of_fully_known_section_is_empty() -> None:
    current = SectionData(has_breaking_change=True)
    current.add(CommitType.FEAT, "feat!: breaking old by A")

    fresh = filter_new_entries(current, flatten_entries(_existing()))

    assert fresh.is_empty()
    assert fresh.has_breaking_change is False
    assert len(fresh) == 0


def test_filter_never_keeps_existing_entries() -> None:
    existing = _existing()
    known = flatten_entries(existing)
    current = SectionData()
    for index, entry in enumerate(sorted(known) + ["feat: x", "fix: y"]):
        commit_type = CommitType.FEAT if index % 2 else CommitType.FIX
        current.entries.setdefault(commit_type, set()).add(entry)

    fresh = filter_new_entries(current, known)

    survivors = set().union(*fresh.entries.values())
    assert survivors.isdisjoint(known)
    assert survivors == {"feat: x", "fix: y"}

"""Detect which collected entries are not yet in the changelog."""

from __future__ import annotations

from typing import Iterable, Set

from .models import ParsedSection, SectionData

BREAKING_TOKEN = "!:"


def flatten_entries(sections: Iterable[ParsedSection]) -> Set[str]:
    """Return every entry string recorded anywhere in ``sections``."""
    known: Set[str] = set()
    for section in sections:
        for bucket in section.entries.values():
            known.update(bucket)
    return known


def filter_new_entries(current: SectionData, known: Set[str]) -> SectionData:
    """Keep only entries of ``current`` whose exact text is not in ``known``.

    The breaking flag is re-derived from the surviving rendered entries by
    looking for ``!:``; a duplicate that was dropped cannot mark the new
    release as breaking. Free text containing ``!:`` elsewhere will also
    match, which is accepted for compatibility with existing files.
    """
    result = SectionData()
    for commit_type, bucket in current.entries.items():
        fresh = {entry for entry in bucket if entry not in known}
        if fresh:
            result.entries[commit_type] = fresh
            if any(BREAKING_TOKEN in entry for entry in fresh):
                result.has_breaking_change = True
    return result


__all__ = ["BREAKING_TOKEN", "filter_new_entries", "flatten_entries"]

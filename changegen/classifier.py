"""Conventional-commit style classification of commit summaries."""

from __future__ import annotations

from typing import NamedTuple, Optional

from .models import PREFIX_TO_COMMIT_TYPE, CommitType

BREAKING_MARKER = "!"


class Classification(NamedTuple):
    commit_type: CommitType
    breaking: bool


def categorize_commit(summary: str) -> Optional[CommitType]:
    """Return the category for ``summary`` or ``None`` when it has no known prefix."""
    prefix, sep, _ = summary.partition(":")
    if not sep:
        return None
    prefix = prefix.lower()
    # fix(core) -> fix
    paren = prefix.find("(")
    if paren != -1:
        prefix = prefix[:paren]
    if prefix.endswith(BREAKING_MARKER):
        prefix = prefix[: -len(BREAKING_MARKER)]
    return PREFIX_TO_COMMIT_TYPE.get(prefix)


def is_breaking_change(summary: str) -> bool:
    colon = summary.find(":")
    return colon > 0 and summary[colon - 1] == BREAKING_MARKER


def classify(summary: str) -> Optional[Classification]:
    commit_type = categorize_commit(summary)
    if commit_type is None:
        return None
    return Classification(commit_type, is_breaking_change(summary))


__all__ = ["BREAKING_MARKER", "Classification", "categorize_commit", "classify", "is_breaking_change"]

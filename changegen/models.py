"""Core data models shared across changegen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Optional, Set, Tuple

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .version import SemanticVersion


class CommitType(Enum):
    """Closed set of changelog categories, declared in render order."""

    ADD = "add"
    FEAT = "feat"
    REFACTOR = "refactor"
    DEPRECATED = "deprecated"
    FIX = "fix"
    DOCS = "docs"
    TEST = "test"
    PERF = "perf"

    @property
    def display_name(self) -> str:
        return COMMIT_TYPE_NAMES[self]

    @property
    def prefix(self) -> str:
        return self.value


COMMIT_TYPE_NAMES: Mapping[CommitType, str] = MappingProxyType(
    {
        CommitType.ADD: "Add",
        CommitType.FEAT: "Feat",
        CommitType.REFACTOR: "Refactor",
        CommitType.DEPRECATED: "Deprecated",
        CommitType.FIX: "Fix",
        CommitType.DOCS: "Docs",
        CommitType.TEST: "Test",
        CommitType.PERF: "Perf",
    }
)

PREFIX_TO_COMMIT_TYPE: Mapping[str, CommitType] = MappingProxyType(
    {commit_type.value: commit_type for commit_type in CommitType}
)

_DISPLAY_TO_COMMIT_TYPE: Mapping[str, CommitType] = MappingProxyType(
    {name.lower(): commit_type for commit_type, name in COMMIT_TYPE_NAMES.items()}
)


def commit_type_for_heading(word: str) -> Optional[CommitType]:
    """Resolve a ``### Heading`` word to its category, ignoring case."""
    return _DISPLAY_TO_COMMIT_TYPE.get(word.lower())


@dataclass(frozen=True)
class CommitRecord:
    """One commit as reported by the history collaborator."""

    summary: str
    short_id: str
    long_id: str
    author_name: str
    parents: Tuple[str, ...] = ()


@dataclass
class SectionData:
    """Entries collected for one scope, keyed by category.

    Entries are the fully rendered changelog lines. Two entries are the same
    only when their rendered text matches exactly; the commit id embedded in
    the link is not consulted on its own.
    """

    entries: Dict[CommitType, Set[str]] = field(default_factory=dict)
    has_breaking_change: bool = False

    def add(self, commit_type: CommitType, entry: str) -> None:
        for other_type, bucket in self.entries.items():
            if other_type is not commit_type and entry in bucket:
                raise ValueError(
                    f"Entry already recorded under {other_type.display_name}: {entry}"
                )
        self.entries.setdefault(commit_type, set()).add(entry)

    def sorted_entries(self, commit_type: CommitType) -> List[str]:
        return sorted(self.entries.get(commit_type, ()))

    def categories(self) -> Set[CommitType]:
        return {commit_type for commit_type, bucket in self.entries.items() if bucket}

    def iter_categories(self) -> Iterator[Tuple[CommitType, List[str]]]:
        """Yield non-empty categories in enum order with sorted entries."""
        for commit_type in CommitType:
            bucket = self.entries.get(commit_type)
            if bucket:
                yield commit_type, sorted(bucket)

    def is_empty(self) -> bool:
        return not any(self.entries.values())

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self.entries.values())


@dataclass
class ParsedSection:
    """One ``##`` block recovered from an existing changelog."""

    name: str
    date: str
    version: Optional["SemanticVersion"] = None
    entries: Dict[CommitType, Set[str]] = field(default_factory=dict)
    has_breaking_change: bool = False

    def add(self, commit_type: CommitType, entry: str) -> None:
        self.entries.setdefault(commit_type, set()).add(entry)
        if "!:" in entry:
            self.has_breaking_change = True


@dataclass
class ChangelogDocument:
    """Parsed sections (newest first) plus the verbatim body they came from."""

    sections: List[ParsedSection] = field(default_factory=list)
    body: str = ""

    @property
    def newest(self) -> Optional[ParsedSection]:
        return self.sections[0] if self.sections else None

    def is_empty(self) -> bool:
        return not self.sections


__all__ = [
    "COMMIT_TYPE_NAMES",
    "ChangelogDocument",
    "CommitRecord",
    "CommitType",
    "PREFIX_TO_COMMIT_TYPE",
    "ParsedSection",
    "SectionData",
    "commit_type_for_heading",
]

"""Versioned changelog generation from conventional commit history."""

from .classifier import categorize_commit, classify, is_breaking_change
from .diffing import filter_new_entries, flatten_entries
from .models import (
    COMMIT_TYPE_NAMES,
    PREFIX_TO_COMMIT_TYPE,
    ChangelogDocument,
    CommitRecord,
    CommitType,
    ParsedSection,
    SectionData,
)
from .orchestrator import GenerationOutcome, MergeResult, Orchestrator, merge_changelog
from .parser import ChangelogParser
from .renderer import ChangelogRenderer, format_entry
from .version import (
    MalformedVersionError,
    SemanticVersion,
    VersionPlanner,
    compute_next_version,
    detect_initial_version,
)

__version__ = "0.1.0"

__all__ = [
    "COMMIT_TYPE_NAMES",
    "ChangelogDocument",
    "ChangelogParser",
    "ChangelogRenderer",
    "CommitRecord",
    "CommitType",
    "GenerationOutcome",
    "MalformedVersionError",
    "MergeResult",
    "Orchestrator",
    "PREFIX_TO_COMMIT_TYPE",
    "ParsedSection",
    "SectionData",
    "SemanticVersion",
    "VersionPlanner",
    "categorize_commit",
    "classify",
    "compute_next_version",
    "detect_initial_version",
    "filter_new_entries",
    "flatten_entries",
    "format_entry",
    "is_breaking_change",
    "merge_changelog",
]

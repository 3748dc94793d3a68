"""Semantic versions and release version planning."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence, Set

from .logging import get_logger
from .models import CommitType, ParsedSection

_VERSION_RE = re.compile(r"v?([0-9]+)\.([0-9]+)\.([0-9]+)")

MINOR_TYPES = frozenset({CommitType.FEAT, CommitType.ADD})
PATCH_TYPES = frozenset({CommitType.FIX, CommitType.PERF, CommitType.REFACTOR})

_LOGGER = get_logger("version")


class MalformedVersionError(ValueError):
    """Raised when a version string does not follow ``vMAJOR.MINOR.PATCH``."""


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """Immutable ``major.minor.patch`` triple ordered component by component."""

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise MalformedVersionError(f"Version components must be non-negative: {self!r}")

    @classmethod
    def parse(cls, text: str) -> "SemanticVersion":
        match = _VERSION_RE.fullmatch(text)
        if not match:
            raise MalformedVersionError(f"Invalid version string: {text}")
        major, minor, patch = (int(group) for group in match.groups())
        return cls(major, minor, patch)

    @classmethod
    def try_parse(cls, text: str) -> Optional["SemanticVersion"]:
        try:
            return cls.parse(text)
        except MalformedVersionError:
            return None

    def bump_major(self) -> "SemanticVersion":
        return SemanticVersion(self.major + 1, 0, 0)

    def bump_minor(self) -> "SemanticVersion":
        return replace(self, minor=self.minor + 1, patch=0)

    def bump_patch(self) -> "SemanticVersion":
        return replace(self, patch=self.patch + 1)

    def __str__(self) -> str:
        return f"v{self.major}.{self.minor}.{self.patch}"


INITIAL_VERSION = SemanticVersion(0, 1, 0)


def compute_next_version(
    base: SemanticVersion,
    types: Iterable[CommitType],
    has_breaking_change: bool,
) -> SemanticVersion:
    """Return the version following ``base`` for a release with ``types``.

    Exactly one tier applies: a breaking change bumps MAJOR, ``feat``/``add``
    bump MINOR, ``fix``/``perf``/``refactor`` bump PATCH, and anything else
    (docs, test, deprecated) leaves the version unchanged.
    """
    present: Set[CommitType] = set(types)
    if has_breaking_change:
        return base.bump_major()
    if present & MINOR_TYPES:
        return base.bump_minor()
    if present & PATCH_TYPES:
        return base.bump_patch()
    return base


def detect_initial_version(tags: Iterable[str]) -> SemanticVersion:
    """Return the highest parseable tag, or ``v0.1.0`` when none parse."""
    best: Optional[SemanticVersion] = None
    for tag in tags:
        version = SemanticVersion.try_parse(tag)
        if version is None:
            _LOGGER.debug("Ignoring non-version tag %s", tag)
            continue
        if best is None or version > best:
            best = version
    return best if best is not None else INITIAL_VERSION


class VersionPlanner:
    """Tracks the running version baseline while new sections are released.

    When the existing changelog has no sections, the first release takes the
    seed verbatim. When its newest section carries no version, every existing
    section collapses onto the seed, including ones that already had a
    version, and bumping continues from there.
    """

    def __init__(self, seed: SemanticVersion, existing: Sequence[ParsedSection]) -> None:
        self.seed = seed
        self.needs_backfill = False
        self._last: Optional[SemanticVersion] = None
        if existing:
            newest = existing[0]
            if newest.version is None:
                self.needs_backfill = True
                for section in existing:
                    section.version = seed
                self._last = seed
            else:
                self._last = newest.version

    @property
    def last(self) -> Optional[SemanticVersion]:
        return self._last

    def next_version(
        self, types: Iterable[CommitType], has_breaking_change: bool
    ) -> SemanticVersion:
        if self._last is None:
            version = self.seed
        else:
            version = compute_next_version(self._last, types, has_breaking_change)
        self._last = version
        return version


__all__ = [
    "INITIAL_VERSION",
    "MalformedVersionError",
    "SemanticVersion",
    "VersionPlanner",
    "compute_next_version",
    "detect_initial_version",
]

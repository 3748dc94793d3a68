"""Reconstruct structured sections from a rendered changelog."""

from __future__ import annotations

import re
from typing import List, Optional

from .logging import get_logger
from .models import ChangelogDocument, CommitType, ParsedSection, commit_type_for_heading
from .version import SemanticVersion

TITLE = "# Changelog"

# ## name[@vX.Y.Z] — YYYY-MM-DD  or  ## name[@vX.Y.Z] -- YYYY-MM-DD
SECTION_RE = re.compile(
    r"^## (?P<name>.+?)(?:@(?P<version>v?\d[^\s@]*))?\s+(?P<sep>--|—)\s+(?P<date>\d{4}-\d{2}-\d{2})$"
)
CATEGORY_RE = re.compile(r"^### (?P<word>\w+)$")
ENTRY_RE = re.compile(r"^- (?P<text>.+)$")


class ChangelogParser:
    """Line-oriented parser for changelogs produced by :class:`ChangelogRenderer`.

    Headers are recognised with or without an ``@version`` suffix and with
    either an em dash or ``--`` before the date, since both shapes can appear
    in the same file over time. Anything that is not a section header, a
    category header or an entry line is ignored.
    """

    def __init__(self) -> None:
        self.logger = get_logger("parser")

    def load(self, text: str) -> ChangelogDocument:
        """Strip the title line and parse the remaining body."""
        body = strip_title(text)
        return ChangelogDocument(sections=self.parse(body), body=body)

    def parse(self, content: str) -> List[ParsedSection]:
        sections: List[ParsedSection] = []
        current: Optional[ParsedSection] = None
        current_type: Optional[CommitType] = None

        for line in content.splitlines():
            match = SECTION_RE.match(line)
            if match:
                version_text = match.group("version")
                version = SemanticVersion.parse(version_text) if version_text else None
                current = ParsedSection(
                    name=match.group("name"),
                    date=match.group("date"),
                    version=version,
                )
                sections.append(current)
                current_type = None
                continue

            match = CATEGORY_RE.match(line)
            if match:
                current_type = commit_type_for_heading(match.group("word"))
                if current_type is None:
                    self.logger.debug("Ignoring unknown category heading %r", line)
                continue

            match = ENTRY_RE.match(line)
            if match and current is not None and current_type is not None:
                current.add(current_type, match.group("text"))

        self.logger.debug("Parsed %d existing sections", len(sections))
        return sections


def strip_title(text: str) -> str:
    """Drop a leading ``# Changelog`` line and the blank lines after it."""
    lines = text.splitlines(keepends=True)
    if lines and lines[0].startswith(TITLE):
        lines = lines[1:]
    while lines and not lines[0].strip():
        lines = lines[1:]
    return "".join(lines)


__all__ = ["CATEGORY_RE", "ENTRY_RE", "SECTION_RE", "TITLE", "ChangelogParser", "strip_title"]

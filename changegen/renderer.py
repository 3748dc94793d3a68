"""Markdown rendering for changelog sections."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .models import CommitRecord, SectionData
from .parser import SECTION_RE, TITLE
from .version import SemanticVersion

SEPARATOR = "—"


def format_entry(record: CommitRecord, url: str) -> str:
    """Render the changelog line for ``record``.

    The rendered text doubles as the dedup key when merging into an existing
    changelog, so changing this format makes every previously written entry
    look new.
    """
    return (
        f"{record.summary} by {record.author_name} in "
        f"[#{record.short_id}]({url}/commit/{record.long_id})"
    )


def section_title(name: str, version: Optional[SemanticVersion] = None) -> str:
    return f"{name}@{version}" if version is not None else name


class ChangelogRenderer:
    """Serialises sections back to the markdown layout the parser reads."""

    def render(self, sections: Sequence[Tuple[str, SectionData]], date: str) -> str:
        out: List[str] = []
        for title, data in sections:
            out.append(f"## {title} {SEPARATOR} {date}\n\n")
            for commit_type, entries in data.iter_categories():
                out.append(f"### {commit_type.display_name}\n\n")
                for entry in entries:
                    out.append(f"- {entry}\n")
                out.append("\n")
        return "".join(out)

    def backfill(self, body: str, version: SemanticVersion) -> str:
        """Stamp every section header in ``body`` with ``@version``.

        Headers that already carry a version are overwritten too, so the
        legacy sections share one version below the next release.
        """
        out: List[str] = []
        for line in body.splitlines(keepends=True):
            content = line.rstrip("\r\n")
            ending = line[len(content):]
            match = SECTION_RE.match(content)
            if match:
                content = (
                    f"## {match.group('name')}@{version} "
                    f"{match.group('sep')} {match.group('date')}"
                )
            out.append(content + ending)
        return "".join(out)

    def document(self, new_content: str, body: str) -> str:
        return f"{TITLE}\n\n{new_content}{body}"


__all__ = ["SEPARATOR", "ChangelogRenderer", "format_entry", "section_title"]

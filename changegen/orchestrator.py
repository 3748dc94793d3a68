"""Pipeline orchestration for changelog generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .classifier import classify
from .config import ChangegenConfig, load_config
from .diffing import filter_new_entries, flatten_entries
from .git.history import GitHistory
from .logging import get_logger
from .models import ChangelogDocument, CommitRecord, SectionData
from .parser import ChangelogParser
from .renderer import ChangelogRenderer, format_entry, section_title
from .version import SemanticVersion, VersionPlanner, detect_initial_version

ALL_CHANGES_SCOPE = "All Changes"

Scope = Tuple[str, SectionData]

_LOGGER = get_logger("orchestrator")


@dataclass
class ReleasedSection:
    """A scope that produced a new section during a run."""

    scope: str
    version: SemanticVersion
    entry_count: int

    @property
    def title(self) -> str:
        return section_title(self.scope, self.version)


@dataclass
class MergeResult:
    """Output of merging fresh scopes into an existing changelog."""

    content: str
    new_content: str
    released: List[ReleasedSection] = field(default_factory=list)
    backfilled: bool = False


@dataclass
class GenerationOutcome:
    """Result of a changelog generation run."""

    path: Path
    content: str
    new_content: str
    released: List[ReleasedSection]
    written: bool
    dry_run: bool

    @property
    def changed(self) -> bool:
        return bool(self.new_content)


def merge_changelog(
    scopes: Sequence[Scope],
    document: ChangelogDocument,
    tags: Iterable[str],
    date: str,
    *,
    renderer: ChangelogRenderer | None = None,
) -> MergeResult:
    """Merge freshly collected scopes into ``document``.

    Scopes are versioned in the order given; each one bumps from the version
    assigned to the scope before it.
    """
    renderer = renderer or ChangelogRenderer()
    known = flatten_entries(document.sections)

    seed = detect_initial_version(tags)
    planner = VersionPlanner(seed, document.sections)
    body = document.body
    if planner.needs_backfill:
        _LOGGER.info("Backfilling %d unversioned sections with %s", len(document.sections), seed)
        body = renderer.backfill(body, seed)

    released: List[ReleasedSection] = []
    titled: List[Tuple[str, SectionData]] = []
    for scope, data in scopes:
        fresh = filter_new_entries(data, known)
        if fresh.is_empty():
            _LOGGER.debug("No new entries for %s", scope)
            continue
        version = planner.next_version(fresh.categories(), fresh.has_breaking_change)
        release = ReleasedSection(scope=scope, version=version, entry_count=len(fresh))
        released.append(release)
        titled.append((release.title, fresh))
        _LOGGER.debug("%s gets %d new entries", release.title, release.entry_count)

    new_content = renderer.render(titled, date)
    return MergeResult(
        content=renderer.document(new_content, body),
        new_content=new_content,
        released=released,
        backfilled=planner.needs_backfill,
    )


class Orchestrator:
    """Coordinates history collection, merging and writing of the changelog."""

    def __init__(
        self,
        history_factory: Callable[[Path], GitHistory] | None = None,
        parser: ChangelogParser | None = None,
        renderer: ChangelogRenderer | None = None,
    ) -> None:
        self.history_factory = history_factory or GitHistory
        self.parser = parser or ChangelogParser()
        self.renderer = renderer or ChangelogRenderer()
        self.logger = get_logger("orchestrator")

    def collect(
        self,
        history: GitHistory,
        follow: Sequence[str],
        url: str,
    ) -> List[Scope]:
        """Build one :class:`SectionData` per scope from the commit history."""
        commits = history.commits()
        self.logger.debug("History contains %d commits", len(commits))
        if not follow:
            self.logger.debug("Collecting logs for entire repository")
            return [(ALL_CHANGES_SCOPE, self._collect_scope(commits, url))]

        scopes: List[Scope] = []
        for path in follow:
            self.logger.debug("Collecting logs for path: %s", path)
            touching = [record for record in commits if history.touches_path(record, path)]
            scopes.append((path, self._collect_scope(touching, url)))
        return scopes

    def run_generate(
        self,
        path: str,
        *,
        output: str | None = None,
        url: str | None = None,
        follow: Sequence[str] | None = None,
        dry_run: bool = False,
        today: str | None = None,
    ) -> GenerationOutcome:
        """Generate or update the changelog for the repository at ``path``."""
        repo_path = Path(path).expanduser().resolve()
        self.logger.info("Starting changelog run for %s", repo_path)
        config = load_config(repo_path)
        settings = self._apply_overrides(config, output=output, url=url, follow=follow)

        history = self.history_factory(repo_path)
        remote_url = settings.url or history.remote_url(settings.remote)
        scopes = self.collect(history, settings.follow, remote_url)

        output_path = settings.output_path
        existing_text = ""
        if output_path.exists():
            existing_text = output_path.read_text(encoding="utf-8")
        document = self.parser.load(existing_text)

        date = today or datetime.now(UTC).strftime("%Y-%m-%d")
        result = merge_changelog(
            scopes, document, history.tags(), date, renderer=self.renderer
        )

        written = False
        if dry_run:
            self.logger.info("Dry run; not writing %s", output_path)
        elif result.content == existing_text:
            self.logger.info("Changelog already up to date")
        else:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(result.content, encoding="utf-8")
            written = True
            self.logger.info("Wrote changelog to: %s", output_path)

        return GenerationOutcome(
            path=output_path,
            content=result.content,
            new_content=result.new_content,
            released=result.released,
            written=written,
            dry_run=dry_run,
        )

    # ------------------------------------------------------------------
    # Internals

    def _collect_scope(self, commits: Iterable[CommitRecord], url: str) -> SectionData:
        data = SectionData()
        for record in commits:
            classification = classify(record.summary)
            if classification is None:
                self.logger.debug("Skipping unclassified commit %s: %s", record.short_id, record.summary)
                continue
            entry = format_entry(record, url)
            data.add(classification.commit_type, entry)
            if classification.breaking:
                data.has_breaking_change = True
            self.logger.debug("%s -> %s", classification.commit_type.display_name, entry)
        return data

    @staticmethod
    def _apply_overrides(
        config: ChangegenConfig,
        *,
        output: str | None,
        url: str | None,
        follow: Sequence[str] | None,
    ) -> ChangegenConfig:
        return ChangegenConfig(
            root=config.root,
            output=output or config.output,
            url=url.rstrip("/") if url else config.url,
            follow=list(follow) if follow else list(config.follow),
            remote=config.remote,
        )


__all__ = [
    "ALL_CHANGES_SCOPE",
    "GenerationOutcome",
    "MergeResult",
    "Orchestrator",
    "ReleasedSection",
    "merge_changelog",
]

"""Commit history, tags and remote lookup backed by the git CLI."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List

from ..logging import get_logger
from ..models import CommitRecord

SSH_PREFIX = "git@github.com:"
SSH_SUFFIX = ".git"
HTTPS_PREFIX = "https://github.com/"
SHORT_ID_LENGTH = 7

_FIELD_SEP = "\x1f"
_LOG_FORMAT = "%H%x1f%an%x1f%P%x1f%s"


class GitError(RuntimeError):
    """Raised when git cannot answer a history query."""


def ssh_to_https(url: str) -> str:
    """Convert ``git@github.com:owner/repo.git`` to ``https://github.com/owner/repo``."""
    if not url.startswith(SSH_PREFIX):
        return url
    path = url[len(SSH_PREFIX):]
    if path.endswith(SSH_SUFFIX):
        path = path[: -len(SSH_SUFFIX)]
    return HTTPS_PREFIX + path


class GitHistory:
    """Reads commits and tags from a local repository."""

    def __init__(self, repo_path: str | Path, runner: Callable[..., str] | None = None) -> None:
        self.repo = Path(repo_path)
        if not (self.repo / ".git").exists():
            raise GitError(f"{repo_path} is not a Git repository")
        self._runner = runner or self._default_runner
        self.logger = get_logger("git")

    def commits(self) -> List[CommitRecord]:
        """Return every commit reachable from HEAD, newest first."""
        if not self._has_head():
            self.logger.debug("Repository %s has no commits yet", self.repo)
            return []
        output = self._run(["git", "log", "--date-order", f"--format={_LOG_FORMAT}", "HEAD"])
        records: List[CommitRecord] = []
        for line in output.splitlines():
            if not line.strip():
                continue
            parts = line.split(_FIELD_SEP, 3)
            if len(parts) < 4:
                self.logger.debug("Skipping malformed log line %r", line)
                continue
            long_id, author, parents, summary = parts
            records.append(
                CommitRecord(
                    summary=summary,
                    short_id=long_id[:SHORT_ID_LENGTH],
                    long_id=long_id,
                    author_name=author,
                    parents=tuple(parents.split()),
                )
            )
        return records

    def touches_path(self, record: CommitRecord, path: str) -> bool:
        """Return True when ``record`` changed ``path`` relative to its first parent."""
        args = ["git", "diff-tree", "-r", "--name-only", "--no-commit-id"]
        if record.parents:
            args.extend([record.parents[0], record.long_id])
        else:
            args.extend(["--root", record.long_id])
        args.extend(["--", path])
        output = self._run(args)
        return any(line.strip() for line in output.splitlines())

    def tags(self) -> List[str]:
        output = self._run(["git", "tag", "--list"])
        return [line.strip() for line in output.splitlines() if line.strip()]

    def remote_url(self, remote: str = "origin") -> str:
        """Return the browsable HTTPS URL of ``remote``."""
        try:
            url = self._run(["git", "remote", "get-url", remote]).strip()
        except GitError as exc:
            raise GitError(f"Remote {remote!r} not found for {self.repo}") from exc
        if not url:
            raise GitError(f"Remote {remote!r} has no URL configured")
        return ssh_to_https(url).rstrip("/")

    # ------------------------------------------------------------------
    # Internals

    def _has_head(self) -> bool:
        try:
            self._run(["git", "rev-parse", "--verify", "--quiet", "HEAD"])
        except GitError:
            return False
        return True

    def _run(self, args: Iterable[str]) -> str:
        arg_list = list(args)
        try:
            return self._runner(arg_list, cwd=self.repo, capture_output=True)
        except subprocess.CalledProcessError as exc:
            raise GitError(f"{' '.join(arg_list)} failed with exit code {exc.returncode}") from exc

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


__all__ = ["GitError", "GitHistory", "ssh_to_https"]

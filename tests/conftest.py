from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.fake_git import FakeGitRunner, make_repo


@pytest.fixture
def git_runner() -> FakeGitRunner:
    """Provide an empty fake git history that tests can append commits to."""
    return FakeGitRunner()


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Provide a repository root containing an empty .git directory."""
    return make_repo(tmp_path)

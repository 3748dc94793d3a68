"""Git collaborators for changegen."""

from .history import GitError, GitHistory, ssh_to_https

__all__ = ["GitError", "GitHistory", "ssh_to_https"]

"""Git operations used by the release pipeline.

Usage:
    from snaprel.git import Repository

    repo = Repository(Path("."))
    status = repo.status()
    if status.is_ok() and status.unwrap().is_clean:
        ...
"""

from snaprel.git.repository import (
    GitError,
    GitStatus,
    Repository,
    StatusEntry,
    parse_status,
)

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
    "parse_status",
]

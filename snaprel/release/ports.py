"""Capabilities the release pipeline drives.

The orchestrator only sees these protocols. Production wiring uses
`snaprel.git.Repository` and the cargo adapters; tests pass in fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from snaprel.core.result import Result

if TYPE_CHECKING:
    from snaprel.cargo.errors import ToolError
    from snaprel.git.repository import GitError, GitStatus
    from snaprel.release.model import ReleaseType


class RepositoryPort(Protocol):
    def status(self) -> Result[GitStatus, GitError]: ...

    def stage(self, paths: Sequence[Path]) -> Result[None, GitError]: ...

    def commit(self, message: str) -> Result[str, GitError]: ...

    def push(self, remote: str | None = None) -> Result[None, GitError]: ...


class VersionAuthority(Protocol):
    def install_if_missing(self) -> Result[None, ToolError]: ...

    def release(self, kind: ReleaseType) -> Result[None, ToolError]:
        """Bump to the release version, publish and record the release point."""
        ...

    def bump(self, kind: ReleaseType) -> Result[None, ToolError]: ...

    def set_version(self, manifest: Path, version: str) -> Result[None, ToolError]: ...


class VersionQuery(Protocol):
    def current_version(self) -> Result[str, ToolError]: ...

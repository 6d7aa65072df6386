"""Git repository adapter.

Implements the repository side of the release pipeline: reading working-tree
status and persisting the snapshot commit. Every method returns a Result.

    repo = Repository(Path("."))
    match repo.status():
        case Ok(status) if status.is_clean:
            ...
        case Ok(status):
            print(f"{len(status.entries)} uncommitted change(s)")
        case Err(e):
            print(e.message)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from snaprel.core.result import Err, Ok, Result
from snaprel.output.console import ConsoleProtocol, Style
from snaprel.platform.process import ProcessError
from snaprel.platform.process import run as run_process
from snaprel.platform.process import run_streaming

# Local operations only; push is network-bound and runs without a timeout.
_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """One line of `git status --porcelain`.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str

    @property
    def is_untracked(self) -> bool:
        return self.xy == "??"

    def pretty_xy(self) -> str:
        """Format XY with dots for spaces (". M" instead of " M")."""
        return self.xy.replace(" ", ".")


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Parsed working-tree status.

    Any entry, untracked files included, makes the tree dirty.

    Attributes:
        branch: Current branch name
        upstream: Upstream branch (e.g., "origin/main"), None if not set
        entries: All status entries (staged, unstaged, untracked)
    """

    branch: str
    upstream: str | None = None
    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        return len(self.entries) == 0

    @property
    def untracked(self) -> list[StatusEntry]:
        return [e for e in self.entries if e.is_untracked]


class Repository:
    """A local git checkout.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path, console: ConsoleProtocol | None = None) -> None:
        self.path = path
        self._console = console

    def exists(self) -> bool:
        """Check if this is a git repository (or worktree)."""
        return (self.path / ".git").exists()

    def status(self) -> Result[GitStatus, GitError]:
        """Run `git status --porcelain=v1 -b` and parse it."""
        result = self._run(["status", "--porcelain=v1", "-b"])
        match result:
            case Err(e):
                return Err(_git_error("status", e, "git status failed"))
            case Ok(stdout):
                return Ok(parse_status(stdout))

    def stage(self, paths: Sequence[Path]) -> Result[None, GitError]:
        """Stage the given paths (relative to the repository root)."""
        if not paths:
            return Ok(None)
        result = self._run(["add", "--", *[str(p) for p in paths]])
        if isinstance(result, Err):
            return Err(_git_error("add", result.error, "git add failed"))
        return Ok(None)

    def commit(self, message: str) -> Result[str, GitError]:
        """Commit staged changes.

        Returns:
            Ok(sha) of the new commit
        """
        result = self._run(["commit", "-m", message])
        if isinstance(result, Err):
            return Err(_git_error("commit", result.error, "git commit failed"))

        head = self._run(["rev-parse", "HEAD"])
        if isinstance(head, Err):
            return Err(_git_error("rev-parse", head.error, "cannot resolve new commit"))
        return Ok(head.value.strip())

    def push(self, remote: str | None = None) -> Result[None, GitError]:
        """Push the current branch.

        With no remote, git's own default (the branch upstream) is used.
        """
        args = ["push"] if remote is None else ["push", remote, "HEAD"]
        cmd = ["git", "-C", str(self.path), *args]
        self._echo(cmd)
        result = run_streaming(cmd, cwd=self.path)
        if isinstance(result, Err):
            return Err(_git_error("push", result.error, "git push failed"))
        return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        cmd = ["git", "-C", str(self.path), *args]
        if args and args[0] in {"add", "commit"}:
            self._echo(cmd)
        return run_process(cmd, cwd=self.path, timeout=_GIT_TIMEOUT_SECONDS)

    def _echo(self, cmd: list[str]) -> None:
        if self._console is not None:
            self._console.print("$ " + " ".join(cmd), Style.DIM)


def _git_error(command: str, e: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=e.stderr.strip() or e.stdout.strip() or fallback,
        returncode=e.returncode,
    )


def parse_status(output: str) -> GitStatus:
    """Parse `git status --porcelain=v1 -b` output."""
    lines = [ln for ln in output.splitlines() if ln.strip()]
    if not lines:
        return GitStatus(branch="")

    entries: list[StatusEntry] = []
    branch = ""
    upstream: str | None = None
    for line in lines:
        if line.startswith("##"):
            branch, upstream = _parse_branch_line(line)
            continue
        entry = _parse_entry(line)
        if entry is not None:
            entries.append(entry)

    return GitStatus(branch=branch, upstream=upstream, entries=tuple(entries))


def _parse_branch_line(line: str) -> tuple[str, str | None]:
    """Parse `## branch...upstream [ahead N]`."""
    s = line[2:].strip()
    s = s.split(" [", 1)[0].strip()
    if "..." in s:
        left, right = s.split("...", 1)
        return (left.strip(), right.strip())
    return (s, None)


def _parse_entry(line: str) -> StatusEntry | None:
    if len(line) < 4:
        return None
    return StatusEntry(xy=line[:2], path=line[3:])

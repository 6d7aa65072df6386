"""Release pipeline.

Runs, in order and stopping at the first failure:

    dirty check -> tooling -> release -> snapshot bump -> query -> re-mark -> persist

Nothing is rolled back. A failure after the release stage leaves a published
version whose snapshot bump still has to be finished by hand; the returned
error carries a hint saying so.
"""

from __future__ import annotations

from pathlib import Path

from snaprel.core.result import Err, Ok, Result
from snaprel.output.console import ConsoleProtocol, Style
from snaprel.release.config import ReleaseConfig
from snaprel.release.errors import ReleaseError
from snaprel.release.model import ReleaseOutcome, ReleaseStage, ReleaseType
from snaprel.release.ports import RepositoryPort, VersionAuthority, VersionQuery
from snaprel.release.semver import SemVer, parse_release_version

__all__ = ["ReleaseOrchestrator"]

_PUBLISHED_HINT = (
    "The release is already published and tagged. "
    "Set the manifest to the next -SNAPSHOT version, commit and push by hand."
)


class ReleaseOrchestrator:
    """Sequences the release pipeline over injected capabilities."""

    def __init__(
        self,
        *,
        root: Path,
        config: ReleaseConfig,
        repository: RepositoryPort,
        authority: VersionAuthority,
        query: VersionQuery,
        console: ConsoleProtocol,
    ) -> None:
        self.root = root
        self.config = config
        self._repo = repository
        self._authority = authority
        self._query = query
        self._console = console

    def run(
        self, release_type: ReleaseType = ReleaseType.PATCH
    ) -> Result[ReleaseOutcome, ReleaseError]:
        clean = self._check_clean()
        if isinstance(clean, Err):
            return clean

        tools = self._ensure_tooling()
        if isinstance(tools, Err):
            return tools

        released = self._release(release_type)
        if isinstance(released, Err):
            return released

        bumped = self._bump_snapshot()
        if isinstance(bumped, Err):
            return bumped

        version = self._read_version()
        if isinstance(version, Err):
            return version

        snapshot = self._remark(version.value)
        if isinstance(snapshot, Err):
            return snapshot

        persisted = self._persist()
        if isinstance(persisted, Err):
            return persisted

        committed, sha = persisted.value
        return Ok(
            ReleaseOutcome(
                release_type=release_type,
                snapshot_version=snapshot.value,
                committed=committed,
                commit=sha,
            )
        )

    def _check_clean(self) -> Result[None, ReleaseError]:
        stage = self._begin(ReleaseStage.DIRTY_CHECK)
        status = self._repo.status()
        if isinstance(status, Err):
            return Err(
                ReleaseError(
                    kind="repository_failed",
                    message=f"cannot read working tree status: {status.error.message}",
                    stage=stage,
                )
            )

        if not status.value.is_clean:
            hint = "Commit or stash your changes, then re-run"
            if status.value.untracked:
                hint = "Untracked files count as changes too. " + hint
            for entry in status.value.entries:
                self._console.print(f"  {entry.pretty_xy()} {entry.path}", Style.DIM)
            return Err(
                ReleaseError(
                    kind="dirty_tree",
                    message=f"working tree has {len(status.value.entries)} uncommitted change(s)",
                    stage=stage,
                    hint=hint,
                )
            )

        self._console.success("working tree clean")
        return Ok(None)

    def _ensure_tooling(self) -> Result[None, ReleaseError]:
        stage = self._begin(ReleaseStage.TOOLING)
        result = self._authority.install_if_missing()
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="tooling_missing",
                    message=result.error.message,
                    stage=stage,
                    hint=result.error.hint,
                )
            )
        return Ok(None)

    def _release(self, kind: ReleaseType) -> Result[None, ReleaseError]:
        stage = self._begin(ReleaseStage.RELEASE, f"({kind})")
        result = self._authority.release(kind)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="release_failed",
                    message=f"{result.error.tool} failed (exit {result.error.returncode})",
                    stage=stage,
                    hint="No snapshot bump was attempted; fix the cause and re-run",
                )
            )
        self._console.success(f"{kind} release published")
        return Ok(None)

    def _bump_snapshot(self) -> Result[None, ReleaseError]:
        stage = self._begin(ReleaseStage.SNAPSHOT_BUMP)
        # The development line always advances one patch, whatever was released.
        result = self._authority.bump(ReleaseType.PATCH)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="snapshot_bump_failed",
                    message=f"{result.error.tool} failed (exit {result.error.returncode})",
                    stage=stage,
                    hint=_PUBLISHED_HINT,
                )
            )
        return Ok(None)

    def _read_version(self) -> Result[SemVer, ReleaseError]:
        stage = self._begin(ReleaseStage.QUERY)
        result = self._query.current_version()
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="query_failed",
                    message=f"cannot read manifest version: {result.error.message}",
                    stage=stage,
                    hint=_PUBLISHED_HINT,
                )
            )

        version = result.value.strip()
        parsed = parse_release_version(version)
        if parsed is None:
            return Err(
                ReleaseError(
                    kind="query_failed",
                    message=f"unexpected manifest version after bump: {version!r}",
                    stage=stage,
                    hint=f"Expected MAJOR.MINOR.PATCH without a suffix. {_PUBLISHED_HINT}",
                )
            )

        self._console.print(f"version: {version}", Style.DIM)
        return Ok(parsed)

    def _remark(self, version: SemVer) -> Result[str, ReleaseError]:
        stage = self._begin(ReleaseStage.REMARK)
        snapshot = version.to_snapshot()

        result = self._authority.set_version(self.root / self.config.manifest, snapshot)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="remark_failed",
                    message=f"cannot set version {snapshot}: {result.error.message}",
                    stage=stage,
                    hint=_PUBLISHED_HINT,
                )
            )

        self._console.success(f"manifest set to {snapshot}")
        return Ok(snapshot)

    def _persist(self) -> Result[tuple[tuple[Path, ...], str], ReleaseError]:
        stage = self._begin(ReleaseStage.PERSIST)
        paths = self._manifest_paths()

        def failed(what: str, message: str) -> Err[ReleaseError]:
            return Err(
                ReleaseError(
                    kind="persist_failed",
                    message=f"{what} failed: {message}",
                    stage=stage,
                    hint="Version files were rewritten locally; commit and push them by hand",
                )
            )

        staged = self._repo.stage(paths)
        if isinstance(staged, Err):
            return failed("git add", staged.error.message)

        committed = self._repo.commit(self.config.commit_message)
        if isinstance(committed, Err):
            return failed("git commit", committed.error.message)

        pushed = self._repo.push(self.config.remote)
        if isinstance(pushed, Err):
            return failed("git push", pushed.error.message)

        self._console.success(f"pushed {committed.value[:12]}: {self.config.commit_message}")
        return Ok((paths, committed.value))

    def _manifest_paths(self) -> tuple[Path, ...]:
        """Manifest plus its lock companion when one exists (staged as opaque bytes)."""
        paths = [self.config.manifest]
        for lock in self.config.lock_paths():
            if (self.root / lock).is_file():
                paths.append(lock)
        return tuple(paths)

    def _begin(self, stage: ReleaseStage, detail: str = "") -> ReleaseStage:
        title = f"{stage.title} {detail}".rstrip()
        self._console.header(title)
        return stage

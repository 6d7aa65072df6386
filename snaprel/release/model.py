from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from snaprel.core.result import Err, Ok, Result
from snaprel.release.errors import ReleaseError

SNAPSHOT_SUFFIX = "-SNAPSHOT"
DEFAULT_COMMIT_MESSAGE = "prepare for further development"


class ReleaseType(StrEnum):
    """Which semver component the release increments."""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


class ReleaseStage(StrEnum):
    """Pipeline steps, in execution order."""

    DIRTY_CHECK = "dirty_check"
    TOOLING = "tooling"
    RELEASE = "release"
    SNAPSHOT_BUMP = "snapshot_bump"
    QUERY = "query"
    REMARK = "remark"
    PERSIST = "persist"

    @property
    def title(self) -> str:
        return _STAGE_TITLES[self]


_STAGE_TITLES = {
    ReleaseStage.DIRTY_CHECK: "Check working tree",
    ReleaseStage.TOOLING: "Ensure release tooling",
    ReleaseStage.RELEASE: "Release",
    ReleaseStage.SNAPSHOT_BUMP: "Bump to next patch",
    ReleaseStage.QUERY: "Read version",
    ReleaseStage.REMARK: "Mark as snapshot",
    ReleaseStage.PERSIST: "Commit and push",
}


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    release_type: ReleaseType
    snapshot_version: str
    committed: tuple[Path, ...]
    commit: str


def parse_release_type(value: str | None) -> Result[ReleaseType, ReleaseError]:
    """Validate a release type coming from a flag, env var or config file.

    None means "not supplied" and selects patch. Any other value outside
    patch/minor/major is rejected rather than defaulted.
    """
    if value is None:
        return Ok(ReleaseType.PATCH)
    try:
        return Ok(ReleaseType(value.strip().lower()))
    except ValueError:
        allowed = ", ".join(t.value for t in ReleaseType)
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"invalid release type: {value!r}",
                hint=f"Expected one of: {allowed}",
            )
        )

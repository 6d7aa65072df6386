"""Error payload for the release pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from snaprel.release.model import ReleaseStage

ReleaseErrorKind = Literal[
    "invalid_input",
    "dirty_tree",
    "repository_failed",
    "tooling_missing",
    "release_failed",
    "snapshot_bump_failed",
    "query_failed",
    "remark_failed",
    "persist_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """A pipeline failure.

    Attributes:
        kind: Failure category, mapped to an exit code by the CLI.
        message: One-line description of what failed.
        stage: The pipeline stage that failed (None for config errors).
        hint: Optional follow-up for the maintainer.
    """

    kind: ReleaseErrorKind
    message: str
    stage: ReleaseStage | None = None
    hint: str | None = None


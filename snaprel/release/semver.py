from __future__ import annotations

import re
from dataclasses import dataclass

from snaprel.release.model import SNAPSHOT_SUFFIX

_RELEASE_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")
_SNAPSHOT_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)" + re.escape(SNAPSHOT_SUFFIX) + r"$"
)


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def to_snapshot(self) -> str:
        return f"{self}{SNAPSHOT_SUFFIX}"


def parse_release_version(text: str) -> SemVer | None:
    """Parse a bare MAJOR.MINOR.PATCH string (no pre-release suffix)."""
    m = _RELEASE_RE.match(text.strip())
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def parse_snapshot_version(text: str) -> SemVer | None:
    """Parse MAJOR.MINOR.PATCH-SNAPSHOT, returning the base version."""
    m = _SNAPSHOT_RE.match(text.strip())
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def is_snapshot(text: str) -> bool:
    return parse_snapshot_version(text) is not None

"""Exit codes for the snaprel CLI.

The numeric values are part of the command-line contract and should remain
stable:
- 0: Success
- 1: User error (dirty working tree, invalid release type, bad config)
- 2: Environment error (release tooling missing, not a git repository)
- 3: Release error (publishing, version bump or re-mark failed)
- 5: I/O error (commit or push of the snapshot failed)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    RELEASE_ERROR = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK

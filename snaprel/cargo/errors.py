from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ToolError:
    """Failure of an external cargo tool.

    Attributes:
        tool: Tool or subcommand that failed (e.g. "cargo release").
        message: What went wrong.
        returncode: Process exit code (-1 if it never ran).
        hint: Optional remediation.
    """

    tool: str
    message: str
    returncode: int = 1
    hint: str | None = None

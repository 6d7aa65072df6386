"""Tools command - install the cargo release helpers if missing."""

from __future__ import annotations

from pathlib import Path

import typer

from snaprel.cli.context import build_context, build_installer
from snaprel.core.errors import ErrorCode
from snaprel.core.result import Err
from snaprel.output.console import Style


def tools(
    repo: Path | None = typer.Option(None, "--repo", help="Repository root (default: cwd)"),
) -> None:
    """Install cargo-release, cargo-get and set-cargo-version when missing."""
    ctx = build_context(repo)
    ctx.console.header("Release tooling")

    result = build_installer(ctx).install_if_missing()
    if isinstance(result, Err):
        ctx.console.error(result.error.message)
        if result.error.hint:
            ctx.console.print(f"hint: {result.error.hint}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    ctx.console.success("release tooling ready")

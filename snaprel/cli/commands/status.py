"""Status command - show whether a release could start right now."""

from __future__ import annotations

from pathlib import Path

import typer

from snaprel.cargo import CargoGetQuery
from snaprel.cli.context import build_context
from snaprel.core.errors import ErrorCode
from snaprel.core.result import Err, Ok
from snaprel.git import Repository
from snaprel.output.console import Style
from snaprel.release.semver import is_snapshot


def status(
    repo: Path | None = typer.Option(None, "--repo", help="Repository root (default: cwd)"),
) -> None:
    """Show branch, working-tree state and manifest version (read-only)."""
    ctx = build_context(repo)
    ctx.console.header(str(ctx.root))

    ready = True
    match Repository(ctx.root).status():
        case Err(e):
            ctx.console.error(f"git status: {e.message}")
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
        case Ok(st):
            upstream = f" -> {st.upstream}" if st.upstream else " (no upstream)"
            ctx.console.print(f"branch: {st.branch}{upstream}")
            if st.is_clean:
                ctx.console.success("working tree clean")
            else:
                ready = False
                ctx.console.warning(f"{len(st.entries)} uncommitted change(s)")
                for entry in st.entries:
                    ctx.console.print(f"  {entry.pretty_xy()} {entry.path}", Style.DIM)

    match CargoGetQuery(ctx.crate_dir).current_version():
        case Err(e):
            ctx.console.warning(f"version unknown ({e.tool}: {e.message})")
        case Ok(version):
            ctx.console.print(f"version: {version}")
            if not is_snapshot(version):
                ctx.console.warning("version is not a -SNAPSHOT; was the last run interrupted?")

    ctx.console.print(f"release type: {ctx.config.release_type}", Style.DIM)
    if not ready:
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

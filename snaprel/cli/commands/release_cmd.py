"""Release command - publish the current version and open the next snapshot."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import typer

from snaprel.cli.commands._helpers import exit_release_error, exit_usage
from snaprel.cli.context import build_context, build_orchestrator
from snaprel.core.result import Err
from snaprel.output.console import Style
from snaprel.release.model import parse_release_type


def release(
    release_type: str | None = typer.Option(
        None,
        "--type",
        "-t",
        envvar="RELEASE_TYPE",
        help="patch, minor or major (default: snaprel.toml, then patch)",
    ),
    repo: Path | None = typer.Option(None, "--repo", help="Repository root (default: cwd)"),
    remote: str | None = typer.Option(None, "--remote", help="Remote to push the snapshot to"),
    manifest: Path | None = typer.Option(
        None,
        "--manifest",
        help="Manifest path relative to the repo root (a Cargo.lock beside it is staged too)",
    ),
) -> None:
    """Release, then bump to the next -SNAPSHOT version and push it."""
    kind = None
    if release_type is not None:
        parsed = parse_release_type(release_type)
        if isinstance(parsed, Err):
            exit_usage(parsed.error.message, hint=parsed.error.hint)
        kind = parsed.value

    ctx = build_context(repo)
    config = ctx.config.with_overrides(release_type=kind, remote=remote, manifest=manifest)
    ctx = replace(ctx, config=config)

    ctx.console.print(f"repository: {ctx.root}", Style.DIM)
    ctx.console.print(f"release type: {config.release_type}", Style.DIM)

    result = build_orchestrator(ctx).run(config.release_type)
    if isinstance(result, Err):
        exit_release_error(result.error, ctx.console)

    outcome = result.value
    ctx.console.newline()
    ctx.console.success(f"{outcome.release_type} release done; now at {outcome.snapshot_version}")

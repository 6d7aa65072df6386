"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from snaprel.core.errors import ErrorCode
from snaprel.output.console import ConsoleProtocol, Style
from snaprel.release.errors import ReleaseError, ReleaseErrorKind


def release_error_code(kind: ReleaseErrorKind) -> ErrorCode:
    if kind in {"invalid_input", "dirty_tree"}:
        return ErrorCode.USER_ERROR
    if kind in {"tooling_missing", "repository_failed"}:
        return ErrorCode.ENV_ERROR
    if kind == "persist_failed":
        return ErrorCode.IO_ERROR
    return ErrorCode.RELEASE_ERROR


def exit_release_error(error: ReleaseError, console: ConsoleProtocol) -> NoReturn:
    """Report a pipeline failure and exit with its mapped code."""
    prefix = f"[{error.stage}] " if error.stage is not None else ""
    console.error(prefix + error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(release_error_code(error.kind)))


def exit_usage(message: str, *, hint: str | None = None) -> NoReturn:
    """Reject bad input before any context (and any subprocess) is created."""
    typer.echo(f"error: {message}", err=True)
    if hint:
        typer.echo(f"hint: {hint}", err=True)
    raise typer.Exit(code=int(ErrorCode.USER_ERROR))

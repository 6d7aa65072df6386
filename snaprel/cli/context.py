from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from snaprel.cargo import CargoGetQuery, CargoReleaseAuthority, CargoToolInstaller
from snaprel.core.errors import ErrorCode
from snaprel.core.result import Err
from snaprel.git import Repository
from snaprel.output.console import ConsoleProtocol, RichConsole, Style
from snaprel.release.config import ReleaseConfig, load_repo_config
from snaprel.release.orchestrator import ReleaseOrchestrator


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: ReleaseConfig
    console: ConsoleProtocol

    @property
    def crate_dir(self) -> Path:
        return (self.root / self.config.manifest).parent


def build_context(repo: Path | None = None) -> CLIContext:
    console = RichConsole()
    try:
        root = (repo or Path.cwd()).expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid --repo: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if not Repository(root).exists():
        typer.echo(f"error: not a git repository: {root}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    config_result = load_repo_config(root)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        if config_result.error.hint:
            console.print(f"hint: {config_result.error.hint}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(root=root, config=config_result.value, console=console)


def build_installer(ctx: CLIContext) -> CargoToolInstaller:
    return CargoToolInstaller(ctx.root, ctx.config.crates, console=ctx.console)


def build_orchestrator(ctx: CLIContext) -> ReleaseOrchestrator:
    """Wire the git and cargo adapters into a pipeline for this repository."""
    return ReleaseOrchestrator(
        root=ctx.root,
        config=ctx.config,
        repository=Repository(ctx.root, console=ctx.console),
        authority=CargoReleaseAuthority(ctx.crate_dir, build_installer(ctx), console=ctx.console),
        query=CargoGetQuery(ctx.crate_dir),
        console=ctx.console,
    )

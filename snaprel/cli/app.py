from __future__ import annotations

import typer

from snaprel import __version__
from snaprel.cli.commands.release_cmd import release
from snaprel.cli.commands.status import status
from snaprel.cli.commands.tools import tools

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command()(release)
app.command()(status)
app.command()(tools)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def main() -> None:
    app()

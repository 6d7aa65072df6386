"""On-demand installation of the cargo subcommands the pipeline uses.

Cargo itself is a system tool installed through rustup; snaprel only checks
that it is on PATH. The release helpers (cargo-release, cargo-get,
set-cargo-version) are installed with `cargo install` when missing.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

from snaprel.cargo.errors import ToolError
from snaprel.core.result import Err, Ok, Result
from snaprel.output.console import ConsoleProtocol, Style
from snaprel.platform.process import run_streaming

__all__ = ["CARGO_INSTALL_HINT", "CargoToolInstaller"]

CARGO_INSTALL_HINT = "Install Rust via https://rustup.rs/"

Which = Callable[[str], str | None]


class CargoToolInstaller:
    """Ensures a set of cargo-installable binaries is on PATH.

    `install_if_missing` is idempotent: a crate whose binary is already on
    PATH is never reinstalled, so calling it twice has the same effect as
    calling it once.
    """

    def __init__(
        self,
        root: Path,
        crates: Sequence[str],
        console: ConsoleProtocol | None = None,
        which: Which = shutil.which,
    ) -> None:
        self.root = root
        self.crates = tuple(crates)
        self._console = console
        self._which = which

    def missing(self) -> list[str]:
        return [crate for crate in self.crates if self._which(crate) is None]

    def install_if_missing(self) -> Result[None, ToolError]:
        if self._which("cargo") is None:
            return Err(
                ToolError(
                    tool="cargo",
                    message="cargo not found in PATH",
                    returncode=-1,
                    hint=CARGO_INSTALL_HINT,
                )
            )

        missing = self.missing()
        if not missing:
            self._print("release tools present: " + ", ".join(self.crates))
            return Ok(None)

        for crate in missing:
            cmd = ["cargo", "install", crate]
            self._print("$ " + " ".join(cmd))
            result = run_streaming(cmd, cwd=self.root)
            if isinstance(result, Err):
                return Err(
                    ToolError(
                        tool="cargo install",
                        message=f"failed to install {crate}",
                        returncode=result.error.returncode,
                        hint=f"Try running: cargo install {crate}",
                    )
                )

        still_missing = self.missing()
        if still_missing:
            return Err(
                ToolError(
                    tool="cargo install",
                    message="installed but not on PATH: " + ", ".join(still_missing),
                    hint="Add ~/.cargo/bin to PATH",
                )
            )
        return Ok(None)

    def _print(self, message: str) -> None:
        if self._console is not None:
            self._console.print(message, Style.DIM)

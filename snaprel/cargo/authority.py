"""Cargo-backed version authority and version query.

`CargoReleaseAuthority` drives cargo-release: a full release (bump, publish to
the registry, tag) is one `cargo release <kind> -x` call, and the post-release
bump is `cargo release version <kind> -x`. Writing an arbitrary version string
goes through `set-cargo-version`. `CargoGetQuery` reads the manifest version
back with `cargo get package.version`.

Semver arithmetic, registry credentials and tagging all stay inside those
tools.
"""

from __future__ import annotations

from pathlib import Path

from snaprel.cargo.errors import ToolError
from snaprel.cargo.tools import CargoToolInstaller
from snaprel.core.result import Err, Ok, Result
from snaprel.output.console import ConsoleProtocol, Style
from snaprel.platform.process import ProcessError
from snaprel.platform.process import run as run_process
from snaprel.platform.process import run_streaming
from snaprel.release.model import ReleaseType

__all__ = ["CargoGetQuery", "CargoReleaseAuthority"]

_QUERY_TIMEOUT_SECONDS = 60.0


def _tool_error(tool: str, e: ProcessError) -> ToolError:
    return ToolError(tool=tool, message=e.detail, returncode=e.returncode)


class CargoReleaseAuthority:
    """Version authority implemented with cargo-release and set-cargo-version.

    Attributes:
        crate_dir: Directory holding the crate manifest; cargo runs here.
    """

    def __init__(
        self,
        crate_dir: Path,
        installer: CargoToolInstaller,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self.crate_dir = crate_dir
        self._installer = installer
        self._console = console

    def install_if_missing(self) -> Result[None, ToolError]:
        return self._installer.install_if_missing()

    def release(self, kind: ReleaseType) -> Result[None, ToolError]:
        """Release the current version: bump, publish, tag and push the tag."""
        return self._stream("cargo release", ["cargo", "release", kind.value, "-x", "--no-confirm"])

    def bump(self, kind: ReleaseType) -> Result[None, ToolError]:
        """Rewrite the manifest version only (no publish, no tag)."""
        return self._stream(
            "cargo release version",
            ["cargo", "release", "version", kind.value, "-x", "--no-confirm"],
        )

    def set_version(self, manifest: Path, version: str) -> Result[None, ToolError]:
        cmd = ["set-cargo-version", str(manifest), version]
        self._echo(cmd)
        result = run_process(cmd, cwd=self.crate_dir, timeout=_QUERY_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            return Err(_tool_error("set-cargo-version", result.error))
        return Ok(None)

    def _stream(self, tool: str, cmd: list[str]) -> Result[None, ToolError]:
        self._echo(cmd)
        result = run_streaming(cmd, cwd=self.crate_dir)
        if isinstance(result, Err):
            return Err(_tool_error(tool, result.error))
        return Ok(None)

    def _echo(self, cmd: list[str]) -> None:
        if self._console is not None:
            self._console.print("$ " + " ".join(cmd), Style.DIM)


class CargoGetQuery:
    """Reads `package.version` from the crate manifest."""

    def __init__(self, crate_dir: Path) -> None:
        self.crate_dir = crate_dir

    def current_version(self) -> Result[str, ToolError]:
        result = run_process(
            ["cargo", "get", "package.version"],
            cwd=self.crate_dir,
            timeout=_QUERY_TIMEOUT_SECONDS,
        )
        if isinstance(result, Err):
            return Err(_tool_error("cargo get", result.error))

        version = result.value.strip()
        if not version:
            return Err(ToolError(tool="cargo get", message="cargo get printed no version"))
        return Ok(version)

"""Typed configuration for the release pipeline.

Settings come from an optional `snaprel.toml` at the repository root:

    [release]
    type = "minor"
    remote = "origin"
    message = "prepare for further development"

    [manifest]
    path = "Cargo.toml"
    lockfile = "Cargo.lock"

    [tools]
    crates = ["cargo-release", "cargo-get", "set-cargo-version"]

CLI flags (and the RELEASE_TYPE environment variable) override the file.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from snaprel.core.result import Err, Ok, Result
from snaprel.core.structured import StrDict, as_str_dict, get_str, get_str_list, get_table
from snaprel.release.model import DEFAULT_COMMIT_MESSAGE, ReleaseType, parse_release_type

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CRATES",
    "ConfigError",
    "ReleaseConfig",
    "load_config",
    "load_repo_config",
]

CONFIG_FILE_NAME = "snaprel.toml"

# Cargo subcommands the pipeline shells out to; each crate installs a binary
# of the same name.
DEFAULT_CRATES: tuple[str, ...] = ("cargo-release", "cargo-get", "set-cargo-version")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or validated."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Settings for one pipeline run.

    Attributes:
        release_type: Increment used for the release itself.
        remote: Remote to push the snapshot commit to (None: git's default).
        commit_message: Message of the snapshot commit.
        manifest: Manifest path, relative to the repository root.
        lockfile: Lock companion path (None: look beside the manifest, then
            at the root). Staged only when it exists.
        crates: Cargo tools installed on demand before releasing.
    """

    release_type: ReleaseType = ReleaseType.PATCH
    remote: str | None = None
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    manifest: Path = Path("Cargo.toml")
    lockfile: Path | None = None
    crates: tuple[str, ...] = DEFAULT_CRATES

    @classmethod
    def from_dict(cls, data: StrDict) -> Result[ReleaseConfig, str]:
        sections: dict[str, StrDict] = {}
        for name in ("release", "manifest", "tools"):
            found = _section(data, name)
            if isinstance(found, Err):
                return found
            sections[name] = found.value
        release, manifest, tools = sections["release"], sections["manifest"], sections["tools"]

        values: dict[str, str | None] = {}
        for section, table, key in (
            ("release", release, "type"),
            ("release", release, "remote"),
            ("release", release, "message"),
            ("manifest", manifest, "path"),
            ("manifest", manifest, "lockfile"),
        ):
            value = _optional_str(table, section, key)
            if isinstance(value, Err):
                return value
            values[f"{section}.{key}"] = value.value

        release_type = parse_release_type(values["release.type"])
        if isinstance(release_type, Err):
            return Err(release_type.error.message)

        crates: tuple[str, ...] = DEFAULT_CRATES
        if "crates" in tools:
            listed = get_str_list(tools, "crates")
            if listed is None:
                return Err("tools.crates must be a list of crate names")
            crates = tuple(listed)

        lockfile = values["manifest.lockfile"]
        return Ok(
            cls(
                release_type=release_type.value,
                remote=values["release.remote"],
                commit_message=values["release.message"] or DEFAULT_COMMIT_MESSAGE,
                manifest=Path(values["manifest.path"] or "Cargo.toml"),
                lockfile=Path(lockfile) if lockfile is not None else None,
                crates=crates,
            )
        )

    def lock_paths(self) -> tuple[Path, ...]:
        """Lockfiles that may accompany the manifest, nearest first.

        Without an explicit `lockfile`, both the manifest's directory and the
        repository root are candidates: a standalone crate keeps its lock next
        to its manifest, a workspace member shares the root one.
        """
        if self.lockfile is not None:
            return (self.lockfile,)
        nearest = self.manifest.parent / "Cargo.lock"
        root = Path("Cargo.lock")
        if nearest == root:
            return (root,)
        return (nearest, root)

    def with_overrides(
        self,
        *,
        release_type: ReleaseType | None = None,
        remote: str | None = None,
        manifest: Path | None = None,
    ) -> ReleaseConfig:
        """Apply command-line overrides; None leaves a field unchanged."""
        out = self
        if release_type is not None:
            out = replace(out, release_type=release_type)
        if remote is not None:
            out = replace(out, remote=remote)
        if manifest is not None:
            out = replace(out, manifest=manifest)
        return out


def _section(data: StrDict, name: str) -> Result[StrDict, str]:
    """A top-level table; absent means empty, anything else but a table is an error."""
    if name not in data:
        return Ok({})
    table = get_table(data, name)
    if table is None:
        return Err(f"[{name}] must be a table")
    return Ok(table)


def _optional_str(table: StrDict, section: str, key: str) -> Result[str | None, str]:
    """A string setting; absent means None, present must be a non-empty string."""
    if key not in table:
        return Ok(None)
    value = get_str(table, key)
    if value is None:
        if key == "type":
            return Err(f"{section}.type must be one of patch, minor, major")
        return Err(f"{section}.{key} must be a non-empty string")
    return Ok(value)


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and validate a config file.

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    parsed = _parse_toml(path)
    if isinstance(parsed, Err):
        return parsed

    config = ReleaseConfig.from_dict(parsed.value)
    if isinstance(config, Err):
        return Err(ConfigError(f"Invalid config: {config.error}", path=path, hint=str(path)))
    return Ok(config.value)


def load_repo_config(repo_root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load `snaprel.toml` from a repository root, or defaults if absent."""
    path = repo_root / CONFIG_FILE_NAME
    if not path.is_file():
        return Ok(ReleaseConfig())
    return load_config(path)

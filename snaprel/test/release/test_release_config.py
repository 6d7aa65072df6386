from __future__ import annotations

from pathlib import Path

import pytest

from snaprel.core.result import Err, Ok
from snaprel.release.config import (
    CONFIG_FILE_NAME,
    DEFAULT_CRATES,
    ReleaseConfig,
    load_config,
    load_repo_config,
)
from snaprel.release.model import ReleaseType


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / CONFIG_FILE_NAME
    path.write_text(content, encoding="utf-8")
    return path


def test_defaults_when_file_absent(tmp_path: Path) -> None:
    result = load_repo_config(tmp_path)

    assert isinstance(result, Ok)
    config = result.value
    assert config == ReleaseConfig()
    assert config.release_type == ReleaseType.PATCH
    assert config.remote is None
    assert config.commit_message == "prepare for further development"
    assert config.manifest == Path("Cargo.toml")
    assert config.lockfile is None
    assert config.lock_paths() == (Path("Cargo.lock"),)
    assert config.crates == DEFAULT_CRATES


def test_full_file(tmp_path: Path) -> None:
    _write(
        tmp_path,
        """
[release]
type = "minor"
remote = "upstream"
message = "chore: next snapshot"

[manifest]
path = "crates/app/Cargo.toml"
lockfile = "Cargo.lock"

[tools]
crates = ["cargo-release", "cargo-get"]
""",
    )

    result = load_repo_config(tmp_path)

    assert isinstance(result, Ok)
    config = result.value
    assert config.release_type == ReleaseType.MINOR
    assert config.remote == "upstream"
    assert config.commit_message == "chore: next snapshot"
    assert config.manifest == Path("crates/app/Cargo.toml")
    assert config.crates == ("cargo-release", "cargo-get")


def test_partial_file_keeps_defaults(tmp_path: Path) -> None:
    _write(tmp_path, '[release]\nremote = "origin"\n')

    result = load_repo_config(tmp_path)

    assert isinstance(result, Ok)
    assert result.value.remote == "origin"
    assert result.value.release_type == ReleaseType.PATCH
    assert result.value.crates == DEFAULT_CRATES


def test_invalid_release_type_is_an_error(tmp_path: Path) -> None:
    path = _write(tmp_path, '[release]\ntype = "hotfix"\n')

    result = load_config(path)

    assert isinstance(result, Err)
    assert "hotfix" in result.error.message
    assert result.error.path == path


def test_invalid_crates_is_an_error(tmp_path: Path) -> None:
    _write(tmp_path, "[tools]\ncrates = [1, 2]\n")

    result = load_repo_config(tmp_path)

    assert isinstance(result, Err)
    assert "tools.crates" in result.error.message


def test_invalid_toml(tmp_path: Path) -> None:
    _write(tmp_path, "[release\n")

    result = load_repo_config(tmp_path)

    assert isinstance(result, Err)
    assert "Invalid TOML" in result.error.message


def test_missing_explicit_file(tmp_path: Path) -> None:
    result = load_config(tmp_path / "nope.toml")

    assert isinstance(result, Err)
    assert "not found" in result.error.message


def test_with_overrides() -> None:
    base = ReleaseConfig(remote="origin")

    assert base.with_overrides() == base

    out = base.with_overrides(
        release_type=ReleaseType.MAJOR, remote="fork", manifest=Path("sub/Cargo.toml")
    )
    assert out.release_type == ReleaseType.MAJOR
    assert out.remote == "fork"
    assert out.manifest == Path("sub/Cargo.toml")
    assert base.remote == "origin"


@pytest.mark.parametrize("value", ["3", '""', '"  "', '["minor"]', "true"])
def test_release_type_must_be_a_named_increment(tmp_path: Path, value: str) -> None:
    _write(tmp_path, f"[release]\ntype = {value}\n")

    result = load_repo_config(tmp_path)

    assert isinstance(result, Err)
    assert "release.type must be one of patch, minor, major" in result.error.message


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ('release = "minor"\n', "[release] must be a table"),
        ("manifest = 1\n", "[manifest] must be a table"),
        ('tools = ["cargo-get"]\n', "[tools] must be a table"),
        ("[release]\nremote = 1\n", "release.remote must be a non-empty string"),
        ('[release]\nmessage = ""\n', "release.message must be a non-empty string"),
        ("[manifest]\npath = false\n", "manifest.path must be a non-empty string"),
        ("[manifest]\nlockfile = []\n", "manifest.lockfile must be a non-empty string"),
    ],
)
def test_malformed_settings_are_errors(tmp_path: Path, content: str, expected: str) -> None:
    _write(tmp_path, content)

    result = load_repo_config(tmp_path)

    assert isinstance(result, Err)
    assert expected in result.error.message


def test_lock_paths_follow_the_manifest() -> None:
    nested = ReleaseConfig(manifest=Path("crates/core/Cargo.toml"))
    pinned = ReleaseConfig(manifest=Path("crates/core/Cargo.toml"), lockfile=Path("Cargo.lock"))

    assert nested.lock_paths() == (Path("crates/core/Cargo.lock"), Path("Cargo.lock"))
    assert pinned.lock_paths() == (Path("Cargo.lock"),)


def test_explicit_lockfile_is_read(tmp_path: Path) -> None:
    _write(tmp_path, '[manifest]\npath = "app/Cargo.toml"\nlockfile = "app/Cargo.lock"\n')

    result = load_repo_config(tmp_path)

    assert isinstance(result, Ok)
    assert result.value.lockfile == Path("app/Cargo.lock")

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

import snaprel.cli.commands.release_cmd as release_cmd
from snaprel import __version__
from snaprel.cli.app import app
from snaprel.cli.commands._helpers import release_error_code
from snaprel.cli.context import CLIContext
from snaprel.core.errors import ErrorCode
from snaprel.core.result import Err, Ok, Result
from snaprel.output.console import MockConsole
from snaprel.release.config import ReleaseConfig
from snaprel.release.errors import ReleaseError
from snaprel.release.model import ReleaseOutcome, ReleaseStage, ReleaseType

runner = CliRunner()


@dataclass
class FakeOrchestrator:
    result: Result[ReleaseOutcome, ReleaseError] | None = None
    runs: list[ReleaseType] = field(default_factory=list)
    contexts: list[CLIContext] = field(default_factory=list)

    def build(self, ctx: CLIContext) -> FakeOrchestrator:
        self.contexts.append(ctx)
        return self

    def run(self, release_type: ReleaseType = ReleaseType.PATCH):
        self.runs.append(release_type)
        if self.result is not None:
            return self.result
        return Ok(
            ReleaseOutcome(
                release_type=release_type,
                snapshot_version="1.2.1-SNAPSHOT",
                committed=(Path("Cargo.toml"),),
                commit="abc",
            )
        )


def _ctx(tmp_path: Path, config: ReleaseConfig | None = None) -> CLIContext:
    return CLIContext(root=tmp_path, config=config or ReleaseConfig(), console=MockConsole())


def _patch(
    monkeypatch: pytest.MonkeyPatch,
    ctx: CLIContext,
    orchestrator: FakeOrchestrator,
) -> list[Path | None]:
    requested: list[Path | None] = []

    def fake_build_context(repo: Path | None = None) -> CLIContext:
        requested.append(repo)
        return ctx

    monkeypatch.setattr(release_cmd, "build_context", fake_build_context)
    monkeypatch.setattr(release_cmd, "build_orchestrator", orchestrator.build)
    return requested


def _forbid_context(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(repo: Path | None = None) -> CLIContext:
        raise AssertionError("context must not be built for invalid input")

    monkeypatch.setattr(release_cmd, "build_context", fail)


def test_invalid_type_exits_before_anything_runs(monkeypatch: pytest.MonkeyPatch) -> None:
    _forbid_context(monkeypatch)

    with pytest.raises(typer.Exit) as exc:
        release_cmd.release(release_type="hotfix", repo=None, remote=None, manifest=None)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_invalid_env_type_exits_non_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    _forbid_context(monkeypatch)

    result = runner.invoke(app, ["release"], env={"RELEASE_TYPE": "hotfix"})

    assert result.exit_code == int(ErrorCode.USER_ERROR)


def test_env_type_is_used(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    orchestrator = FakeOrchestrator()
    _patch(monkeypatch, _ctx(tmp_path), orchestrator)

    result = runner.invoke(app, ["release"], env={"RELEASE_TYPE": "minor"})

    assert result.exit_code == 0
    assert orchestrator.runs == [ReleaseType.MINOR]


def test_flag_overrides_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    orchestrator = FakeOrchestrator()
    _patch(monkeypatch, _ctx(tmp_path), orchestrator)

    result = runner.invoke(app, ["release", "--type", "major"], env={"RELEASE_TYPE": "minor"})

    assert result.exit_code == 0
    assert orchestrator.runs == [ReleaseType.MAJOR]


def test_config_type_used_when_unset(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("RELEASE_TYPE", raising=False)
    orchestrator = FakeOrchestrator()
    ctx = _ctx(tmp_path, ReleaseConfig(release_type=ReleaseType.MINOR))
    _patch(monkeypatch, ctx, orchestrator)

    result = runner.invoke(app, ["release"], env={"RELEASE_TYPE": None})

    assert result.exit_code == 0
    assert orchestrator.runs == [ReleaseType.MINOR]


def test_defaults_to_patch(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    orchestrator = FakeOrchestrator()
    _patch(monkeypatch, _ctx(tmp_path), orchestrator)

    release_cmd.release(release_type=None, repo=None, remote=None, manifest=None)

    assert orchestrator.runs == [ReleaseType.PATCH]


def test_overrides_reach_the_orchestrator(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    orchestrator = FakeOrchestrator()
    requested = _patch(monkeypatch, _ctx(tmp_path), orchestrator)

    release_cmd.release(
        release_type="patch",
        repo=tmp_path,
        remote="upstream",
        manifest=Path("crates/core/Cargo.toml"),
    )

    assert requested == [tmp_path]
    (ctx,) = orchestrator.contexts
    assert ctx.config.remote == "upstream"
    assert ctx.config.manifest == Path("crates/core/Cargo.toml")
    assert ctx.crate_dir == tmp_path / "crates" / "core"


@pytest.mark.parametrize(
    ("kind", "code"),
    [
        ("dirty_tree", ErrorCode.USER_ERROR),
        ("repository_failed", ErrorCode.ENV_ERROR),
        ("tooling_missing", ErrorCode.ENV_ERROR),
        ("release_failed", ErrorCode.RELEASE_ERROR),
        ("snapshot_bump_failed", ErrorCode.RELEASE_ERROR),
        ("query_failed", ErrorCode.RELEASE_ERROR),
        ("remark_failed", ErrorCode.RELEASE_ERROR),
        ("persist_failed", ErrorCode.IO_ERROR),
    ],
)
def test_pipeline_errors_map_to_exit_codes(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, kind: str, code: ErrorCode
) -> None:
    ctx = _ctx(tmp_path)
    error = ReleaseError(
        kind=kind,  # type: ignore[arg-type]
        message="it broke",
        stage=ReleaseStage.RELEASE,
        hint="do the thing",
    )
    _patch(monkeypatch, ctx, FakeOrchestrator(result=Err(error)))

    with pytest.raises(typer.Exit) as exc:
        release_cmd.release(release_type=None, repo=None, remote=None, manifest=None)

    assert exc.value.exit_code == int(code)
    assert release_error_code(error.kind) == code
    console = ctx.console
    assert isinstance(console, MockConsole)
    assert console.find("error: [release] it broke")
    assert console.find("hint: do the thing")


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output

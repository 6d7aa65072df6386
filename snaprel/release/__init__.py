"""Release pipeline: model, config and orchestration."""

from snaprel.release.config import ReleaseConfig, load_repo_config
from snaprel.release.errors import ReleaseError
from snaprel.release.model import ReleaseOutcome, ReleaseStage, ReleaseType, parse_release_type
from snaprel.release.orchestrator import ReleaseOrchestrator

__all__ = [
    "ReleaseConfig",
    "ReleaseError",
    "ReleaseOrchestrator",
    "ReleaseOutcome",
    "ReleaseStage",
    "ReleaseType",
    "load_repo_config",
    "parse_release_type",
]

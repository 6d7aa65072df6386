"""Process execution helpers."""

from snaprel.platform.process import ProcessError, run, run_streaming

__all__ = ["ProcessError", "run", "run_streaming"]

"""Runner interface for one build-tool invocation."""

from __future__ import annotations

from typing import Protocol

from msdev_batch.batch.models import JobOutcome, JobResult

__all__ = ["JobOutcome", "JobResult", "JobRunner"]


class JobRunner(Protocol):
    """Protocol implemented by job runners."""

    def run(self, tool_path: str, arguments: str, timeout_seconds: int) -> JobResult:
        """Invoke the tool once and return the classified result."""

"""Job runner implementations."""

from msdev_batch.batch.backend.base import JobOutcome, JobResult, JobRunner
from msdev_batch.batch.backend.process_runner import ProcessRunner

__all__ = [
    "JobOutcome",
    "JobResult",
    "JobRunner",
    "ProcessRunner",
]

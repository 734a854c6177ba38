"""Sequential batch execution of an external build tool.

One child process per project, run strictly in order. The legacy tool
(``msdev.exe``) is single-instance, so jobs never overlap; the only
concurrency lives inside a single job where stdout and stderr are drained
on their own threads while the parent waits for exit.
"""

from msdev_batch.batch.arguments import build_arguments, build_command_line
from msdev_batch.batch.locator import resolve_executable, resolve_tool_path
from msdev_batch.batch.models import (
    BatchConfig,
    BatchPolicy,
    BatchReport,
    BuildDefaults,
    CompletedJob,
    JobDescriptor,
    JobOutcome,
    JobResult,
)
from msdev_batch.batch.orchestrator import BatchOrchestrator, run_batch

__all__ = [
    "BatchConfig",
    "BatchOrchestrator",
    "BatchPolicy",
    "BatchReport",
    "BuildDefaults",
    "CompletedJob",
    "JobDescriptor",
    "JobOutcome",
    "JobResult",
    "build_arguments",
    "build_command_line",
    "resolve_executable",
    "resolve_tool_path",
    "run_batch",
]

"""Domain models for batch build execution."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

DEFAULT_PLATFORM = "Win32"
DEFAULT_CONFIGURATION = "Debug"
DEFAULT_TIMEOUT_SECONDS = 5 * 60


class JobOutcome(str, Enum):
    """Classified result of one job."""

    SUCCESS = "success"
    TOOL_FAILURE = "tool_failure"
    TIMED_OUT = "timed_out"
    TOOL_NOT_FOUND = "tool_not_found"


class BatchPolicy(str, Enum):
    """What to do with the remaining jobs after one fails."""

    STOP_ON_ERROR = "stop_on_error"
    RUN_ALL = "run_all"


@dataclass(frozen=True, slots=True)
class JobDescriptor:
    """One build request; empty fields fall back to batch defaults."""

    project: str
    platform: str = ""
    configuration: str = ""
    action: str = ""


@dataclass(frozen=True, slots=True)
class BuildDefaults:
    """Batch-level values used when a job leaves a field empty."""

    platform: str = DEFAULT_PLATFORM
    configuration: str = DEFAULT_CONFIGURATION
    action: str = ""


@dataclass(frozen=True, slots=True)
class BatchConfig:
    """Settings for one batch invocation.

    ``environ`` is the environment snapshot taken at batch start; tool lookup
    reads it instead of the live process environment.
    """

    tool_path: str = ""
    defaults: BuildDefaults = field(default_factory=BuildDefaults)
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    policy: BatchPolicy = BatchPolicy.RUN_ALL
    terminate_on_timeout: bool = True
    environ: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError(f"Per-job timeout must be positive, got {self.timeout_seconds!r}.")

    @property
    def stop_on_error(self) -> bool:
        return self.policy is BatchPolicy.STOP_ON_ERROR


@dataclass(frozen=True, slots=True)
class JobResult:
    """Execution outcome of one tool invocation.

    ``exit_code`` is ``None`` whenever the process never reported one: it timed
    out, it could not be launched, or the tool was missing.
    """

    exit_code: int | None
    outcome: JobOutcome
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    duration_seconds: float = 0.0

    def __post_init__(self) -> None:
        if (self.outcome is JobOutcome.SUCCESS) != (self.exit_code == 0):
            raise ValueError(
                f"Outcome {self.outcome.value!r} is inconsistent "
                f"with exit code {self.exit_code!r}.",
            )
        if self.outcome is JobOutcome.TIMED_OUT and self.exit_code is not None:
            raise ValueError("Timed out jobs cannot carry an exit code.")

    @property
    def succeeded(self) -> bool:
        return self.outcome is JobOutcome.SUCCESS


@dataclass(frozen=True, slots=True)
class CompletedJob:
    """A job paired with the result of its single invocation."""

    job: JobDescriptor
    arguments: str
    result: JobResult


@dataclass(slots=True)
class BatchReport:
    """Aggregate view of one batch run."""

    tool_path: str
    completed: list[CompletedJob] = field(default_factory=list)
    configuration_error: str | None = None
    stopped_early: bool = False

    @property
    def success(self) -> bool:
        if self.configuration_error is not None or self.stopped_early:
            return False
        return all(item.result.succeeded for item in self.completed)

    @property
    def attempted(self) -> int:
        return len(self.completed)

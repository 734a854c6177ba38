"""Controllers for batch CLI commands."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from msdev_batch.batch.backend import JobOutcome
from msdev_batch.batch.locator import resolve_executable, resolve_tool_path
from msdev_batch.batch.models import BatchReport, CompletedJob, JobDescriptor
from msdev_batch.batch.orchestrator import BatchOrchestrator
from msdev_batch.config import Settings

_PROJECT_SPEC_SEPARATOR = "|"


@dataclass(slots=True)
class BuildCommand:
    """CLI input for a batch build."""

    projects: tuple[str, ...]
    tool_path: str | None = None
    target: str | None = None
    timeout_minutes: int | None = None
    timeout_seconds: int | None = None
    stop_on_error: bool | None = None
    terminate_on_timeout: bool | None = None
    platform: str | None = None
    configuration: str | None = None


@dataclass(slots=True)
class LocateCommand:
    """CLI input for tool path resolution."""

    tool_path: str | None = None


@dataclass(slots=True)
class CommandResult:
    """Lines to print plus the overall verdict."""

    lines: list[str] = field(default_factory=list)
    success: bool = True


def parse_project_spec(raw: str) -> JobDescriptor:
    """Parse ``<project>[|<platform>[|<configuration>]]`` into a job."""

    parts = [part.strip() for part in raw.split(_PROJECT_SPEC_SEPARATOR)]
    if not parts[0]:
        raise ValueError(f"Invalid project entry: {raw!r}. Project path is empty.")
    if len(parts) > 3:  # noqa: PLR2004
        raise ValueError(
            f"Invalid project entry: {raw!r}. "
            "Expected format '<project>|<platform>|<configuration>'.",
        )
    project, platform, configuration = (parts + ["", ""])[:3]
    return JobDescriptor(project=project, platform=platform, configuration=configuration)


class BatchCliController:
    """CLI controller for batch build operations."""

    def build(self, command: BuildCommand) -> CommandResult:
        """Run one batch and summarize every attempted job."""

        jobs = [parse_project_spec(raw) for raw in command.projects]
        settings = _apply_overrides(Settings.from_env(), command)
        config = settings.to_batch_config(timeout_seconds=command.timeout_seconds)

        report = BatchOrchestrator(config).run(jobs)
        return CommandResult(
            lines=_format_report(report, total=len(jobs)),
            success=report.success,
        )

    def locate(self, command: LocateCommand) -> CommandResult:
        """Show which tool a batch would launch."""

        settings = Settings.from_env()
        explicit = command.tool_path if command.tool_path is not None else settings.tool_path
        tool_path = resolve_tool_path(explicit, environ=os.environ)
        resolved = resolve_executable(tool_path)
        if resolved is None:
            return CommandResult(lines=[f"Tool: {tool_path} (not found)"], success=False)
        return CommandResult(lines=[f"Tool: {resolved}"], success=True)


def _apply_overrides(settings: Settings, command: BuildCommand) -> Settings:
    overrides = {
        "tool_path": command.tool_path,
        "target": command.target,
        "timeout_minutes": command.timeout_minutes,
        "stop_on_error": command.stop_on_error,
        "terminate_on_timeout": command.terminate_on_timeout,
        "platform": command.platform,
        "configuration": command.configuration,
    }
    return replace(
        settings,
        **{name: value for name, value in overrides.items() if value is not None},
    )


def _format_report(report: BatchReport, *, total: int) -> list[str]:
    if report.configuration_error is not None:
        return [f"Error: {report.configuration_error}"]

    lines = [f"Tool: {report.tool_path}"]
    lines.extend(_format_job(item) for item in report.completed)
    skipped = total - report.attempted
    built = sum(item.result.succeeded for item in report.completed)
    summary = f"Built {built}/{total} projects"
    if skipped:
        summary += f", {skipped} skipped after failure"
    lines.append(summary + (": OK" if report.success else ": FAILED"))
    return lines


def _format_job(item: CompletedJob) -> str:
    result = item.result
    status = {
        JobOutcome.SUCCESS: "ok",
        JobOutcome.TOOL_FAILURE: f"failed (exit={result.exit_code})",
        JobOutcome.TIMED_OUT: "timed out",
        JobOutcome.TOOL_NOT_FOUND: "tool not found",
    }[result.outcome]
    if result.outcome is JobOutcome.TOOL_FAILURE and result.exit_code is None:
        status = f"failed ({result.error})"
    return f"  {item.job.project}: {status} [{result.duration_seconds:.1f}s]"

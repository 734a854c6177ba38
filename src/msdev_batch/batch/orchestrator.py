"""Sequential batch loop with stop-on-error policy."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from msdev_batch.batch.arguments import build_arguments
from msdev_batch.batch.backend import JobOutcome, JobResult, JobRunner, ProcessRunner
from msdev_batch.batch.locator import resolve_executable, resolve_tool_path
from msdev_batch.batch.models import BatchConfig, BatchReport, CompletedJob, JobDescriptor

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    """Run jobs one at a time in input order and decide whether to go on."""

    def __init__(
        self,
        config: BatchConfig,
        *,
        runner: JobRunner | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._runner = runner or ProcessRunner(terminate_on_timeout=config.terminate_on_timeout)
        self._log = log or logger

    def run(self, jobs: Iterable[JobDescriptor]) -> BatchReport:
        config = self._config
        tool_path = resolve_tool_path(config.tool_path, environ=config.environ)
        report = BatchReport(tool_path=tool_path)

        resolved = resolve_executable(tool_path)
        if resolved is None:
            report.configuration_error = (
                f"Could not find build tool at {tool_path}. Use --tool-path to specify it."
            )
            self._log.error(report.configuration_error)
            return report

        for job in jobs:
            arguments = build_arguments(job, config.defaults)
            self._log.debug("Building %s: %s %s", job.project, resolved, arguments)
            result = self._runner.run(resolved, arguments, config.timeout_seconds)
            report.completed.append(CompletedJob(job=job, arguments=arguments, result=result))
            self._log_result(job, result)

            if not result.succeeded and config.stop_on_error:
                report.stopped_early = True
                self._log.error("Stopping batch after failure of %s.", job.project)
                break

        return report

    def _log_result(self, job: JobDescriptor, result: JobResult) -> None:
        if result.stdout.strip():
            self._log.info(result.stdout.rstrip())

        if result.outcome is JobOutcome.SUCCESS:
            self._log.debug("Built %s in %.1fs", job.project, result.duration_seconds)
            return

        if result.outcome is JobOutcome.TIMED_OUT:
            self._log.error(
                "Timed out building %s after %ss.",
                job.project,
                self._config.timeout_seconds,
            )
        elif result.exit_code is None:
            self._log.error("Could not build %s: %s", job.project, result.error)
        else:
            self._log.error("Build of %s failed with exit code %s.", job.project, result.exit_code)

        if result.stderr.strip():
            self._log.error(result.stderr.rstrip())


def run_batch(
    jobs: Iterable[JobDescriptor],
    config: BatchConfig,
    *,
    runner: JobRunner | None = None,
    log: logging.Logger | None = None,
) -> bool:
    """Run the batch and return overall success."""

    return BatchOrchestrator(config, runner=runner, log=log).run(jobs).success

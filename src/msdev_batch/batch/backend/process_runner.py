"""Subprocess-based runner for one build-tool invocation."""

from __future__ import annotations

import logging
import subprocess
import threading
import time
from typing import IO, cast

from msdev_batch.batch.arguments import build_command_line
from msdev_batch.batch.backend.base import JobOutcome, JobResult
from msdev_batch.batch.locator import resolve_executable

logger = logging.getLogger(__name__)

_TERMINATE_GRACE_SECONDS = 2
_CREATE_NO_WINDOW = getattr(subprocess, "CREATE_NO_WINDOW", 0)


class _StreamDrain:
    """Read one pipe to end-of-stream on a dedicated thread."""

    def __init__(self, stream: IO[str], *, name: str) -> None:
        self._stream = stream
        self._chunks: list[str] = []
        self._done = threading.Event()
        self._thread = threading.Thread(target=self._drain, daemon=True, name=name)

    def start(self) -> None:
        self._thread.start()

    def _drain(self) -> None:
        try:
            for line in iter(self._stream.readline, ""):
                self._chunks.append(line)
        except (OSError, ValueError) as error:
            logger.debug("Stream %s closed while draining: %s", self._thread.name, error)
        finally:
            try:
                self._stream.close()
            except OSError:
                pass
            self._done.set()

    def join(self, timeout: float) -> bool:
        """Wait for end-of-stream; ``False`` means the drain was abandoned."""

        if not self._done.wait(timeout):
            return False
        self._thread.join(timeout)
        return True

    @property
    def name(self) -> str:
        return self._thread.name

    def text(self) -> str:
        return "".join(list(self._chunks))


class ProcessRunner:
    """Launch the tool, drain both pipes concurrently and bound the wait.

    The parent never blocks on process exit alone: each output pipe has its own
    drain thread, so a child that fills a pipe buffer keeps making progress.
    """

    def __init__(self, *, terminate_on_timeout: bool = True) -> None:
        self.terminate_on_timeout = terminate_on_timeout

    def run(self, tool_path: str, arguments: str, timeout_seconds: int) -> JobResult:
        resolved = resolve_executable(tool_path)
        if resolved is None:
            return JobResult(
                exit_code=None,
                outcome=JobOutcome.TOOL_NOT_FOUND,
                error=f"Build tool not found: {tool_path}",
            )

        started = time.monotonic()
        try:
            run_args = build_command_line(resolved, arguments)
            logger.debug("Launching %s", run_args)
            process = subprocess.Popen(  # noqa: S603
                run_args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                creationflags=_CREATE_NO_WINDOW,
            )
        except FileNotFoundError:
            return JobResult(
                exit_code=None,
                outcome=JobOutcome.TOOL_NOT_FOUND,
                error=f"Build tool not found: {tool_path}",
            )
        except (OSError, ValueError) as error:
            return JobResult(
                exit_code=None,
                outcome=JobOutcome.TOOL_FAILURE,
                error=f"Build tool failed to start: {error}",
            )

        stdout_drain = _StreamDrain(
            cast(IO[str], process.stdout),
            name=f"drain-stdout-{process.pid}",
        )
        stderr_drain = _StreamDrain(
            cast(IO[str], process.stderr),
            name=f"drain-stderr-{process.pid}",
        )
        stdout_drain.start()
        stderr_drain.start()

        exit_code: int | None
        try:
            exit_code = process.wait(timeout=timeout_seconds)
        except subprocess.TimeoutExpired:
            exit_code = None
            logger.debug("Process %s exceeded %ss", process.pid, timeout_seconds)
            if self.terminate_on_timeout:
                _terminate_process(process)

        drain_deadline = time.monotonic() + timeout_seconds
        for drain in (stdout_drain, stderr_drain):
            if not drain.join(max(0.0, drain_deadline - time.monotonic())):
                logger.warning(
                    "Abandoned output drain %s after %ss; captured text may be incomplete.",
                    drain.name,
                    timeout_seconds,
                )

        duration = time.monotonic() - started
        if exit_code is None:
            outcome = JobOutcome.TIMED_OUT
        elif exit_code == 0:
            outcome = JobOutcome.SUCCESS
        else:
            outcome = JobOutcome.TOOL_FAILURE

        return JobResult(
            exit_code=exit_code,
            outcome=outcome,
            stdout=stdout_drain.text(),
            stderr=stderr_drain.text(),
            duration_seconds=duration,
        )


def _terminate_process(process: subprocess.Popen[str]) -> None:
    try:
        process.terminate()
    except OSError:
        return
    try:
        process.wait(timeout=_TERMINATE_GRACE_SECONDS)
    except subprocess.TimeoutExpired:
        try:
            process.kill()
        except OSError:
            return
        try:
            process.wait(timeout=_TERMINATE_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            logger.warning("Process %s did not exit after kill.", process.pid)

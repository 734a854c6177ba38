"""Command-line rendering for the legacy build tool."""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import PureWindowsPath

from msdev_batch.batch.models import BuildDefaults, JobDescriptor


def build_arguments(job: JobDescriptor, defaults: BuildDefaults) -> str:
    """Render the argument string for one job.

    Ex. ``"C:\\P\\app.dsp" /MAKE "app - Win32 Release" /CLEAN``
    """

    platform = job.platform or defaults.platform
    configuration = job.configuration or defaults.configuration
    action = job.action or defaults.action

    arguments = (
        f'"{job.project}" /MAKE "{project_base_name(job.project)} - {platform} {configuration}"'
    )
    if action:
        arguments += f" /{action}"
    return arguments


def project_base_name(project: str) -> str:
    """File name of ``project`` without its extension, for either separator style."""

    return PureWindowsPath(project).stem


def build_command_line(
    tool_path: str,
    arguments: str,
    *,
    os_name: str | None = None,
) -> str | list[str]:
    """Combine tool and argument string into something ``Popen`` accepts.

    Windows receives the raw command line so the tool sees the argument string
    exactly as rendered; elsewhere it is split into argv.
    """

    current_os_name = os_name or os.name
    if current_os_name == "nt":
        head = subprocess.list2cmdline([tool_path])
        stripped = arguments.strip()
        return f"{head} {stripped}" if stripped else head

    return [tool_path, *shlex.split(arguments)]

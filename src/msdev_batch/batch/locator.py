"""Build tool path resolution."""

from __future__ import annotations

import os
import shutil
from collections.abc import Mapping

TOOL_DIR_ENV_VAR = "MSDevDir"
TOOL_BIN_SUBDIR = "Bin"
TOOL_EXE_NAME = "msdev.exe"


def resolve_tool_path(
    explicit_path: str,
    env_var_name: str = TOOL_DIR_ENV_VAR,
    bin_subdir: str = TOOL_BIN_SUBDIR,
    exe_name: str = TOOL_EXE_NAME,
    *,
    environ: Mapping[str, str],
) -> str:
    """Return the tool path to launch.

    An explicit override wins, then ``<environ[env_var_name]>/<bin_subdir>/<exe_name>``,
    then the bare ``exe_name`` left to search-path resolution at launch time.
    Nothing is checked on disk here.
    """

    if explicit_path:
        return explicit_path

    tool_root = environ.get(env_var_name, "")
    if tool_root:
        return os.path.join(tool_root, bin_subdir, exe_name)

    return exe_name


def resolve_executable(tool_path: str) -> str | None:
    """Return a launchable path for ``tool_path`` or ``None`` if there is none."""

    if not tool_path:
        return None
    return shutil.which(tool_path)

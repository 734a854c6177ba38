"""Shared test fixtures."""

from __future__ import annotations

import os
import stat
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

_FAKE_MSDEV = '''
import subprocess
import sys
import time
from pathlib import Path

calls = Path(__file__).with_name("calls.log")
with calls.open("a", encoding="utf-8") as handle:
    handle.write("\\t".join(sys.argv[1:]) + "\\n")

if len(sys.argv) < 2:
    print("Usage: MSDEV [project] /MAKE [config] [/REBUILD | /CLEAN]", file=sys.stderr)
    raise SystemExit(1)

name = Path(sys.argv[1].replace("\\\\", "/")).stem
if name.startswith("fail"):
    print(f"Compiling {name}.cpp")
    print(f"{name}.cpp(3) : error C2065: undeclared identifier", file=sys.stderr)
    raise SystemExit(2)
if name.startswith("slow"):
    print("Compiling...", flush=True)
    time.sleep(30)
if name.startswith("orphan"):
    subprocess.Popen([sys.executable, "-c", "import time; time.sleep(10)"])
if name.startswith("flood"):
    for index in range(4000):
        sys.stdout.write(f"out {index:05d} " + "o" * 40 + "\\n")
        sys.stderr.write(f"err {index:05d} " + "e" * 40 + "\\n")
print(f"{name} - 0 error(s), 0 warning(s)")
'''


@dataclass(slots=True)
class FakeMsdev:
    """Fake build tool launcher plus the log of its invocations."""

    path: Path
    calls_log: Path

    def calls(self) -> list[list[str]]:
        if not self.calls_log.exists():
            return []
        return [line.split("\t") for line in self.calls_log.read_text("utf-8").splitlines()]


@pytest.fixture()
def fake_msdev(tmp_path: Path) -> FakeMsdev:
    """Executable that mimics msdev.exe; behavior is keyed by project name prefix."""

    bin_dir = tmp_path / "MSDev98" / "Bin"
    bin_dir.mkdir(parents=True)
    implementation = bin_dir / "msdev_impl.py"
    implementation.write_text(_FAKE_MSDEV.strip() + "\n", "utf-8")

    if os.name == "nt":
        launcher = bin_dir / "msdev.cmd"
        launcher.write_text(
            f'@echo off\r\n"{sys.executable}" "{implementation}" %*\r\n',
            "utf-8",
        )
    else:
        launcher = bin_dir / "msdev.exe"
        launcher.write_text(
            f'#!/usr/bin/env sh\nexec "{sys.executable}" "{implementation}" "$@"\n',
            "utf-8",
        )
        launcher.chmod(launcher.stat().st_mode | stat.S_IXUSR)

    return FakeMsdev(path=launcher, calls_log=bin_dir / "calls.log")


@pytest.fixture()
def projects_dir(tmp_path: Path) -> Path:
    path = tmp_path / "projects"
    path.mkdir()
    return path

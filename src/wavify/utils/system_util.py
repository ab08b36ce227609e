"""
Utility functions for running the provisioned tools as subprocesses.

Arguments are always passed as a discrete vector, never as a single shell
string, so paths with spaces or quotes need no escaping.
"""
import os
import platform
import stat
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union


def is_windows() -> bool:
    return platform.system() == "Windows"


def executable_name(tool: str) -> str:
    """Return the on-disk file name of `tool` for the running OS."""
    return f"{tool}.exe" if is_windows() else tool


def make_executable(path: Path) -> None:
    """Add execute permission for everyone who can read the file (POSIX only)."""
    if is_windows():
        return
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def run_tool(executable: Union[str, os.PathLike], arguments: Sequence[str],
             timeout: Optional[float] = None) -> Tuple[int, str, str]:
    """Run `executable` with `arguments` and return (code, stdout, stderr).

    Spawn failures (``OSError``) and ``subprocess.TimeoutExpired`` propagate to
    the caller.
    """
    cmd: List[str] = [str(executable), *arguments]
    p = subprocess.run(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        stdin=subprocess.DEVNULL,
        text=True,
        errors="replace",
        timeout=timeout,
    )
    return p.returncode, p.stdout, p.stderr

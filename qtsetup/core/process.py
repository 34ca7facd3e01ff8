"""
External process execution.

All external tools (installer, qmake, pip, qdep, platform helpers) are run
through run_command(), which blocks until the process exits and raises
ExternalToolError on a non-zero exit status or a missing executable.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from qtsetup.core.exceptions import ExternalToolError

logger = logging.getLogger(__name__)

Command = Sequence[Union[str, Path]]


def run_command(
    cmd: Command,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
    capture: bool = False,
) -> subprocess.CompletedProcess:
    """
    Run an external command and wait for it.

    Args:
        cmd: Command and arguments
        env: Complete environment for the child (default: inherit)
        cwd: Working directory
        capture: Capture stdout/stderr as text instead of streaming them to
            the runner log

    Returns:
        CompletedProcess of the finished command

    Raises:
        ExternalToolError: If the executable cannot be started or exits
            with a non-zero status

    Example:
        >>> run_command(["qmake", "-version"])
    """
    cmd = [str(c) for c in cmd]
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            env=dict(env) if env is not None else None,
            cwd=str(cwd) if cwd else None,
            capture_output=capture,
            text=True,
        )
    except OSError as e:
        raise ExternalToolError(f"Failed to execute {cmd[0]}: {e}", command=cmd) from e

    if result.returncode != 0:
        message = f"{Path(cmd[0]).name} failed with exit code {result.returncode}"
        if capture and result.stderr:
            message += f"\nError output:\n{result.stderr.strip()}"
        raise ExternalToolError(message, command=cmd, returncode=result.returncode)

    return result


def which(name: str, path: Optional[str] = None) -> Path:
    """
    Locate an executable on PATH.

    Args:
        name: Executable name (e.g., 'qmake', 'python')
        path: Search path (default: the PATH of the current process)

    Returns:
        Absolute path of the executable

    Raises:
        ExternalToolError: If the executable is not found
    """
    search_path = path if path is not None else os.environ.get("PATH", "")
    found = shutil.which(name, path=search_path)
    if not found:
        raise ExternalToolError(f"Unable to locate executable file: {name}")
    logger.debug(f"Resolved {name} -> {found}")
    return Path(found)

"""
Runner directory resolution for qtsetup.

Directory Structure:
    Runner temp ($RUNNER_TEMP or <runner-root>/actions/temp):
        - qtsetup-XXXX/                 : per-run work root
          - home/                       : isolated installer home
          - qt/                         : installer target directory
          - qt-installer-script.qs      : generated control script

    Tool cache ($RUNNER_TOOL_CACHE or <runner-root>/actions/cache):
        - qt/<version>/<platform>/      : cached installation
        - qt/<version>/<platform>.complete
"""

from pathlib import Path
from typing import Mapping


def get_temp_root(environ: Mapping[str, str], runner_root: Path) -> Path:
    """
    Get the runner temporary directory.

    Args:
        environ: Process environment
        runner_root: OS-conventional base used when RUNNER_TEMP is unset

    Example:
        >>> get_temp_root({}, Path("/home"))
        PosixPath('/home/actions/temp')
    """
    temp_dir = environ.get("RUNNER_TEMP", "")
    if temp_dir:
        return Path(temp_dir)
    return Path(runner_root) / "actions" / "temp"


def get_tool_cache_root(environ: Mapping[str, str], runner_root: Path) -> Path:
    """
    Get the runner tool cache directory.

    Args:
        environ: Process environment
        runner_root: OS-conventional base used when RUNNER_TOOL_CACHE is unset
    """
    cache_dir = environ.get("RUNNER_TOOL_CACHE", "")
    if cache_dir:
        return Path(cache_dir)
    return Path(runner_root) / "actions" / "cache"

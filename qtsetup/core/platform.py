"""
Host platform detection for qtsetup.

Identifies the operating system of the runner so the matching Qt platform
implementation can be selected.

Usage:
    from qtsetup.core.platform import detect_host_os

    print(f"Running on {detect_host_os()}")
"""

import platform

from qtsetup.core.exceptions import ConfigurationError

SUPPORTED_HOSTS = ("linux", "windows", "macos")


def detect_host_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name: 'linux', 'windows' or 'macos'

    Raises:
        ConfigurationError: If the operating system is not supported
    """
    return normalize_host_os(platform.system())


def normalize_host_os(system: str) -> str:
    """
    Map an OS name (platform.system() or sys.platform style) to a host id.

    Raises:
        ConfigurationError: If the name does not denote a supported host
    """
    system = (system or "").lower()

    if system in ("linux", "linux2"):
        return "linux"
    elif system in ("windows", "win32", "cygwin"):
        return "windows"
    elif system in ("darwin", "macos", "mac"):
        return "macos"
    else:
        raise ConfigurationError(
            f"Install platform '{system}' is not supported. "
            f"Supported hosts: {', '.join(SUPPORTED_HOSTS)}"
        )


__all__ = [
    "SUPPORTED_HOSTS",
    "detect_host_os",
    "normalize_host_os",
]

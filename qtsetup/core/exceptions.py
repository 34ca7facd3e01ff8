"""
Centralized exception hierarchy for qtsetup.

Every failure is fatal: nothing is retried and nothing is downgraded to a
warning. The CLI turns any QtSetupError into a non-zero exit status.
"""

from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class QtSetupError(Exception):
    """Base exception for all qtsetup errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(QtSetupError):
    """Raised for an unsupported host/platform combination or invalid inputs."""

    pass


class InvalidVersionError(ConfigurationError):
    """Invalid Qt version string."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(
            f"Invalid Qt version '{version}': expected an explicit release "
            f"version such as 5.15.2"
        )


# ============================================================================
# External Tool Exceptions
# ============================================================================


class ExternalToolError(QtSetupError):
    """Raised when an external process fails or cannot be found."""

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
    ):
        self.command = list(command) if command else []
        self.returncode = returncode
        if self.command:
            message = f"{message}\nCommand: {' '.join(str(c) for c in self.command)}"
        super().__init__(message)


class DownloadError(QtSetupError):
    """Raised when the installer download fails."""

    pass


# ============================================================================
# Filesystem Exceptions
# ============================================================================


class FilesystemError(QtSetupError):
    """Raised when a move, mkdir, symlink or cleanup operation fails."""

    pass

"""
Core functionality for qtsetup.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    QtSetupError,
    ConfigurationError,
    InvalidVersionError,
    ExternalToolError,
    DownloadError,
    FilesystemError,
)

from .platform import (
    detect_host_os,
    normalize_host_os,
)

from .directory import (
    get_temp_root,
    get_tool_cache_root,
)

from .runner import (
    OutputSink,
    ActionsSink,
    MemorySink,
)

__all__ = [
    "QtSetupError",
    "ConfigurationError",
    "InvalidVersionError",
    "ExternalToolError",
    "DownloadError",
    "FilesystemError",
    "detect_host_os",
    "normalize_host_os",
    "get_temp_root",
    "get_tool_cache_root",
    "OutputSink",
    "ActionsSink",
    "MemorySink",
]

"""
Qt target platforms and their selection.

select_platform() maps (host OS, platform key) to exactly one Platform using
PLATFORM_TABLE. Keys can match several coarse categories, so the table is
ordered and the first matching row wins. An empty fragment matches any key.
"""

import logging
from typing import List, Mapping, Optional, Tuple, Type

from qtsetup.core.exceptions import ConfigurationError
from qtsetup.core.platform import normalize_host_os
from qtsetup.core.runner import OutputSink
from qtsetup.platforms.base import CROSS_TARGET_MARKERS, Platform, normalize_platform_key
from qtsetup.platforms.linux import AndroidPlatform, LinuxPlatform, WasmPlatform
from qtsetup.platforms.macos import IosPlatform, MacAndroidPlatform, MacosPlatform
from qtsetup.platforms.windows import MingwPlatform, MsvcPlatform

logger = logging.getLogger(__name__)

PLATFORM_TABLE: List[Tuple[str, str, Type[Platform]]] = [
    ("linux", "android", AndroidPlatform),
    ("linux", "wasm", WasmPlatform),
    ("linux", "", LinuxPlatform),
    ("windows", "mingw", MingwPlatform),
    ("windows", "", MsvcPlatform),
    ("macos", "ios", IosPlatform),
    ("macos", "android", MacAndroidPlatform),
    ("macos", "", MacosPlatform),
]


def platform_class_for(host_os: str, platform_key: str) -> Type[Platform]:
    """
    Look up the Platform class for a host and platform key.

    Raises:
        ConfigurationError: If the host is unsupported or the key is empty
    """
    host = normalize_host_os(host_os)
    if not platform_key or not platform_key.strip():
        raise ConfigurationError("Platform key cannot be empty")

    key = platform_key.lower()
    for table_host, fragment, platform_cls in PLATFORM_TABLE:
        if table_host == host and fragment in key:
            return platform_cls

    raise ConfigurationError(f"No platform available for {platform_key} on {host}")


def select_platform(
    host_os: str,
    platform_key: str,
    version: str,
    environ: Optional[Mapping[str, str]] = None,
    sink: Optional[OutputSink] = None,
) -> Platform:
    """
    Create the Platform for this run.

    No I/O happens here; an unsupported host fails before anything is touched.

    Example:
        >>> select_platform("linux", "gcc_64", "5.15.2")
        LinuxPlatform(platform_key='gcc_64', version='5.15.2')
    """
    platform_cls = platform_class_for(host_os, platform_key)
    platform = platform_cls(platform_key, version, environ=environ, sink=sink)
    logger.debug(f"Selected {platform.name} for {platform_key}")
    return platform


__all__ = [
    "CROSS_TARGET_MARKERS",
    "PLATFORM_TABLE",
    "Platform",
    "normalize_platform_key",
    "platform_class_for",
    "select_platform",
    "AndroidPlatform",
    "LinuxPlatform",
    "WasmPlatform",
    "MingwPlatform",
    "MsvcPlatform",
    "IosPlatform",
    "MacAndroidPlatform",
    "MacosPlatform",
]

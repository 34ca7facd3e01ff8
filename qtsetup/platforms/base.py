"""
Platform abstraction for Qt installations.

Every OS and toolchain difference (executable names, installer artifact,
module naming, environment setup, install hooks, artifact layout) lives
behind the Platform interface, so the installer itself never branches on
the operating system.

Classes:
    Platform: Abstract base class implemented once per target family

Constants:
    CROSS_TARGET_MARKERS: Platform key fragments of targets whose binaries
        cannot run on the build host
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from qtsetup.core.exceptions import ConfigurationError
from qtsetup.core.runner import MemorySink, OutputSink

logger = logging.getLogger(__name__)

# Checked in order; the first fragment found in the platform key wins
CROSS_TARGET_MARKERS = ("android", "wasm", "winrt", "ios")

# Host-family prefixes accepted in front of the Qt architecture name
HOST_KEY_PREFIXES = ("linux-", "windows-", "win-", "macos-", "mac-", "darwin-")


def normalize_platform_key(platform_key: str) -> str:
    """
    Strip an optional host prefix from a platform key.

    Example:
        >>> normalize_platform_key("linux-gcc_64")
        'gcc_64'
        >>> normalize_platform_key("android_arm64_v8a")
        'android_arm64_v8a'
    """
    key = platform_key.strip()
    lowered = key.lower()
    for prefix in HOST_KEY_PREFIXES:
        if lowered.startswith(prefix):
            return key[len(prefix) :]
    return key


class Platform(ABC):
    """
    Abstract base class for Qt target platforms.

    A Platform is created once per run from the platform key and the Qt
    version and is never changed afterwards.

    Attributes:
        platform_key: Platform key as given by the caller (cache key)
        arch: Qt architecture name derived from the key (e.g., 'gcc_64')
        version: Qt version being installed
        environ: Environment the platform reads settings from
        sink: Destination for exported variables and PATH entries

    Abstract Methods:
        installer_artifact_name(): Online installer file name
        install_platform_id(): Module namespace fragment
        run_installer(): Execute the online installer
        resolve_artifact_subdir(): Local and published install directory
        runner_root(): Default base of the runner work directories
    """

    #: Host operating system this family runs on
    host_os = ""

    def __init__(
        self,
        platform_key: str,
        version: str,
        environ: Optional[Mapping[str, str]] = None,
        sink: Optional[OutputSink] = None,
    ):
        if not platform_key or not platform_key.strip():
            raise ConfigurationError("Platform key cannot be empty")

        self.platform_key = platform_key.strip()
        self.arch = normalize_platform_key(self.platform_key)
        self.version = version
        self.environ = os.environ if environ is None else environ
        self.sink = sink if sink is not None else MemorySink()

    @property
    def name(self) -> str:
        """Short name for logs (e.g., 'LinuxPlatform(gcc_64)')."""
        return f"{type(self).__name__}({self.arch})"

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------

    def build_tool_name(self) -> str:
        """Executable file name of qmake inside the bin directory."""
        return "qmake"

    def query_tool_name(self) -> str:
        """Executable queried with -query; the same binary as the build tool."""
        return self.build_tool_name()

    def make_tool_name(self) -> str:
        """Make program consuming qmake generated makefiles."""
        return "make"

    @abstractmethod
    def installer_artifact_name(self) -> str:
        """File name of the online installer for this host."""
        pass

    @abstractmethod
    def install_platform_id(self) -> str:
        """Module namespace fragment (e.g., 'gcc_64', 'win64_msvc2019_64')."""
        pass

    def install_subdir_name(self) -> str:
        """Directory the installer creates below <root>/<version>/."""
        return self.install_platform_id()

    def extra_packages(self) -> Optional[List[str]]:
        """Fully qualified modules every install on this platform needs."""
        return None

    # ------------------------------------------------------------------
    # Test policy
    # ------------------------------------------------------------------

    def test_flags(self) -> str:
        """Arguments for running the project's tests (e.g., TESTARGS)."""
        return ""

    def supports_post_install_tests(self) -> bool:
        """False for cross targets whose binaries cannot run on the host."""
        key = self.platform_key.lower()
        for marker in CROSS_TARGET_MARKERS:
            if marker in key:
                logger.debug(f"Tests disabled for {self.platform_key} ({marker} target)")
                return False
        return True

    # ------------------------------------------------------------------
    # Hooks and side effects
    # ------------------------------------------------------------------

    def run_pre_install_hook(self, cache_hit: bool) -> None:
        """
        Prepare the host before Qt is used.

        Runs on every run, before acquisition on a cache miss. Must be
        idempotent when cache_hit is True.
        """
        pass

    def run_post_install_hook(self) -> None:
        """Finish platform setup once Qt is on PATH."""
        pass

    @abstractmethod
    def run_installer(
        self, installer: Path, args: List[str], install_root: Path, home_dir: Path
    ) -> None:
        """
        Run the online installer non-interactively.

        Args:
            installer: Downloaded installer artifact
            args: Installer arguments (control script and caller extras)
            install_root: Directory the control script installs into
            home_dir: Isolated home directory for the installer's own state

        Raises:
            ExternalToolError: If the installer fails
        """
        pass

    def export_environment(self, tool_root: Path) -> None:
        """Publish platform specific environment variables and PATH entries."""
        pass

    @abstractmethod
    def resolve_artifact_subdir(self, tool_root: Path) -> Tuple[Path, str]:
        """
        Locate the install directory for build artifacts.

        Returns:
            (local directory, path string to publish)
        """
        pass

    @abstractmethod
    def runner_root(self) -> Path:
        """Base of actions/temp and actions/cache when the runner sets neither."""
        pass

    def installer_environment(self, home_dir: Path) -> dict:
        """Environment for the installer process with its home redirected."""
        env = dict(self.environ)
        env["HOME"] = str(home_dir)
        return env

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name}(platform_key={self.platform_key!r}, version={self.version!r})"

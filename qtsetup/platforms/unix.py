"""
Behavior shared by the Linux and macOS platform families.
"""

import logging
import os
import stat
from pathlib import Path
from typing import List, Tuple

from packaging.version import Version

from qtsetup.core.exceptions import FilesystemError
from qtsetup.core.process import run_command
from qtsetup.platforms.base import Platform

logger = logging.getLogger(__name__)


class UnixPlatform(Platform):
    """Common base for POSIX hosts."""

    def run_installer(
        self, installer: Path, args: List[str], install_root: Path, home_dir: Path
    ) -> None:
        _make_executable(installer)
        run_command(
            [installer, *args],
            env=self.installer_environment(home_dir),
        )

    def resolve_artifact_subdir(self, tool_root: Path) -> Tuple[Path, str]:
        install_dir = self._home() / "install"
        return install_dir, str(install_dir)

    def _home(self) -> Path:
        home = self.environ.get("HOME")
        return Path(home) if home else Path.home()


class AndroidMixin:
    """
    Android cross target.

    Since Qt 5.14 all Android ABIs ship as a single 'android' module; older
    releases use one module per ABI, named like the platform key.
    """

    MULTI_ABI_SINCE = Version("5.14")

    def install_platform_id(self) -> str:
        if Version(self.version) >= self.MULTI_ABI_SINCE:
            return "android"
        return self.arch

    def export_environment(self, tool_root: Path) -> None:
        super().export_environment(tool_root)

        if not self.environ.get("ANDROID_NDK_ROOT"):
            for candidate in ("ANDROID_NDK_LATEST_HOME", "ANDROID_NDK_HOME"):
                ndk = self.environ.get(candidate)
                if ndk:
                    self.sink.export_variable("ANDROID_NDK_ROOT", ndk)
                    break
            else:
                logger.warning(
                    "No Android NDK found (ANDROID_NDK_ROOT, ANDROID_NDK_LATEST_HOME, "
                    "ANDROID_NDK_HOME); qmake will need one to build"
                )

        if not self.environ.get("ANDROID_SDK_ROOT") and self.environ.get("ANDROID_HOME"):
            self.sink.export_variable("ANDROID_SDK_ROOT", self.environ["ANDROID_HOME"])


def _make_executable(path: Path) -> None:
    try:
        mode = os.stat(path).st_mode
        os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        raise FilesystemError(f"Failed to make '{path}' executable: {e}") from e

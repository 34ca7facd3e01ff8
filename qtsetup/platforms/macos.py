"""
macOS hosts: desktop clang builds plus iOS and Android cross targets.

The macOS online installer ships as a disk image; it is mounted, the
installer application inside is run, and the image is detached again.
"""

import logging
from pathlib import Path
from typing import List

from qtsetup.core.exceptions import ExternalToolError
from qtsetup.core.filesystem import ensure_directory
from qtsetup.core.process import run_command
from qtsetup.platforms.unix import AndroidMixin, UnixPlatform

logger = logging.getLogger(__name__)


class MacosPlatform(UnixPlatform):
    """macOS desktop (clang_64)."""

    host_os = "macos"

    def installer_artifact_name(self) -> str:
        return "qt-unified-mac-x64-online.dmg"

    def install_platform_id(self) -> str:
        return self.arch

    def runner_root(self) -> Path:
        return Path("/Users")

    def run_installer(
        self, installer: Path, args: List[str], install_root: Path, home_dir: Path
    ) -> None:
        mount_point = ensure_directory(install_root.parent / "installer-volume")

        run_command(
            [
                "hdiutil",
                "attach",
                "-nobrowse",
                "-readonly",
                "-noautoopen",
                "-mountpoint",
                mount_point,
                installer,
            ],
            capture=True,
        )
        try:
            binary = _find_installer_binary(mount_point)
            run_command([binary, *args], env=self.installer_environment(home_dir))
        finally:
            try:
                run_command(["hdiutil", "detach", mount_point, "-force"], capture=True)
            except ExternalToolError as e:
                logger.warning(f"Failed to detach installer image: {e}")


class IosPlatform(MacosPlatform):
    """iOS cross builds."""

    def install_platform_id(self) -> str:
        return "ios"


class MacAndroidPlatform(AndroidMixin, MacosPlatform):
    """Android cross builds on a macOS host."""

    pass


def _find_installer_binary(mount_point: Path) -> Path:
    apps = sorted(mount_point.glob("*.app"))
    if not apps:
        raise ExternalToolError(f"No installer application found in {mount_point}")
    app = apps[0]
    return app / "Contents" / "MacOS" / app.stem

"""
Linux hosts: desktop gcc builds plus Android and WebAssembly cross targets.
"""

import logging
import os
from pathlib import Path

from qtsetup.core.exceptions import ExternalToolError
from qtsetup.core.process import run_command, which
from qtsetup.platforms.unix import AndroidMixin, UnixPlatform

logger = logging.getLogger(__name__)

# Runtime libraries of the xcb platform plugin and of OpenGL builds
SYSTEM_PACKAGES = [
    "libgl1-mesa-dev",
    "libxkbcommon-x11-0",
    "libxcb-icccm4",
    "libxcb-image0",
    "libxcb-keysyms1",
    "libxcb-randr0",
    "libxcb-render-util0",
    "libxcb-xinerama0",
]


class LinuxPlatform(UnixPlatform):
    """Linux desktop (gcc_64)."""

    host_os = "linux"

    def installer_artifact_name(self) -> str:
        return "qt-unified-linux-x64-online.run"

    def install_platform_id(self) -> str:
        return self.arch

    def runner_root(self) -> Path:
        return Path("/home")

    def test_flags(self) -> str:
        # Runners have no display
        return "-platform minimal"

    def run_pre_install_hook(self, cache_hit: bool) -> None:
        try:
            apt = which("apt-get", path=self.environ.get("PATH"))
        except ExternalToolError:
            logger.debug("apt-get not available, assuming Qt runtime libraries are present")
            return

        cmd = [str(apt), "-qq", "install", "-y", "--no-install-recommends", *SYSTEM_PACKAGES]
        if hasattr(os, "geteuid") and os.geteuid() != 0:
            cmd.insert(0, str(which("sudo", path=self.environ.get("PATH"))))

        logger.info("Installing Qt runtime libraries")
        run_command(cmd, env=dict(self.environ, DEBIAN_FRONTEND="noninteractive"))

    def installer_environment(self, home_dir: Path) -> dict:
        env = super().installer_environment(home_dir)
        env["QT_QPA_PLATFORM"] = "minimal"
        return env


class AndroidPlatform(AndroidMixin, LinuxPlatform):
    """Android cross builds on a Linux host."""

    def test_flags(self) -> str:
        return ""

    def run_pre_install_hook(self, cache_hit: bool) -> None:
        # Android builds need no host GUI libraries
        pass


class WasmPlatform(LinuxPlatform):
    """
    WebAssembly cross builds on a Linux host.

    The emscripten SDK is expected to be activated by the caller.
    """

    def install_platform_id(self) -> str:
        return "wasm_32"

    def test_flags(self) -> str:
        return ""

    def run_pre_install_hook(self, cache_hit: bool) -> None:
        pass

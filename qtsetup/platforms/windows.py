"""
Windows hosts: MSVC (desktop, ARM64, WinRT) and MinGW toolchains.
"""

import logging
import re
from pathlib import Path, PureWindowsPath
from typing import List, Mapping, Optional, Tuple

from qtsetup.core.exceptions import ConfigurationError, ExternalToolError
from qtsetup.core.process import run_command
from qtsetup.core.runner import OutputSink
from qtsetup.platforms.base import Platform

logger = logging.getLogger(__name__)

MINGW_PATTERN = re.compile(r"^mingw(?P<ver>\d+)_(?P<bits>32|64)$")
MSVC_PATTERN = re.compile(
    r"^(?:winrt_(?P<winrt_cpu>x64|x86|armv7)_)?msvc(?P<year>\d{4})(?:_(?P<cpu>64|arm64))?$"
)

# vswhere -version ranges per Visual Studio release
VS_VERSION_RANGES = {
    "2015": "[14.0,15.0)",
    "2017": "[15.0,16.0)",
    "2019": "[16.0,17.0)",
    "2022": "[17.0,18.0)",
}

WINRT_VCVARS_ARCH = {"x64": "x64", "x86": "x86", "armv7": "x64_arm"}


class WindowsPlatform(Platform):
    """Common base for Windows hosts."""

    host_os = "windows"

    def build_tool_name(self) -> str:
        return "qmake.exe"

    def installer_artifact_name(self) -> str:
        return "qt-unified-windows-x64-online.exe"

    def runner_root(self) -> Path:
        return Path(self.environ.get("USERPROFILE") or "C:\\")

    def run_installer(
        self, installer: Path, args: List[str], install_root: Path, home_dir: Path
    ) -> None:
        run_command([installer, *args], env=self.installer_environment(home_dir))

    def installer_environment(self, home_dir: Path) -> dict:
        env = super().installer_environment(home_dir)
        env["USERPROFILE"] = str(home_dir)
        return env

    def resolve_artifact_subdir(self, tool_root: Path) -> Tuple[Path, str]:
        install_dir = self.runner_root() / "install"
        # qmake's INSTALL_ROOT is prepended to the drive-qualified prefix,
        # so the published value must not carry a drive itself
        drive = PureWindowsPath(str(install_dir)).drive
        return install_dir, str(install_dir)[len(drive) :]


class MingwPlatform(WindowsPlatform):
    """MinGW builds (e.g., mingw81_64)."""

    def __init__(
        self,
        platform_key: str,
        version: str,
        environ: Optional[Mapping[str, str]] = None,
        sink: Optional[OutputSink] = None,
    ):
        super().__init__(platform_key, version, environ, sink)
        match = MINGW_PATTERN.match(self.arch)
        if not match:
            raise ConfigurationError(
                f"Unsupported MinGW platform '{self.platform_key}' (expected e.g. mingw81_64)"
            )
        self.mingw_version = match.group("ver")
        self.bits = match.group("bits")

    def make_tool_name(self) -> str:
        return "mingw32-make"

    def install_platform_id(self) -> str:
        return f"win{self.bits}_mingw{self.mingw_version}"

    def install_subdir_name(self) -> str:
        return self.arch

    def extra_packages(self) -> Optional[List[str]]:
        return [f"qt.tools.win{self.bits}_mingw{self.mingw_version}0"]

    def mingw_tools_dir(self, tool_root: Path) -> Path:
        """Compiler directory the tools module installs next to the Qt version."""
        return (
            Path(tool_root).parent.parent
            / "Tools"
            / f"mingw{self.mingw_version}0_{self.bits}"
            / "bin"
        )

    def export_environment(self, tool_root: Path) -> None:
        tools_dir = self.mingw_tools_dir(tool_root)
        if tools_dir.is_dir():
            self.sink.add_path(tools_dir)
        else:
            logger.info(f"No bundled MinGW at {tools_dir}, using the compiler on PATH")


class MsvcPlatform(WindowsPlatform):
    """MSVC builds (e.g., msvc2019_64, msvc2019, msvc2019_arm64, winrt_x64_msvc2019)."""

    def __init__(
        self,
        platform_key: str,
        version: str,
        environ: Optional[Mapping[str, str]] = None,
        sink: Optional[OutputSink] = None,
    ):
        super().__init__(platform_key, version, environ, sink)
        match = MSVC_PATTERN.match(self.arch)
        if not match:
            raise ConfigurationError(
                f"Unsupported MSVC platform '{self.platform_key}' (expected e.g. msvc2019_64)"
            )
        self.msvc_year = match.group("year")
        self.cpu = match.group("cpu")
        self.winrt_cpu = match.group("winrt_cpu")

    def make_tool_name(self) -> str:
        return "nmake"

    def install_platform_id(self) -> str:
        if self.winrt_cpu:
            return f"win64_msvc{self.msvc_year}_winrt_{self.winrt_cpu}"
        if self.cpu:
            return f"win64_msvc{self.msvc_year}_{self.cpu}"
        return f"win32_msvc{self.msvc_year}"

    def install_subdir_name(self) -> str:
        return self.arch

    def vcvars_arch(self) -> str:
        """Architecture argument for vcvarsall.bat."""
        if self.winrt_cpu:
            return WINRT_VCVARS_ARCH[self.winrt_cpu]
        if self.cpu == "arm64":
            return "x64_arm64"
        if self.cpu == "64":
            return "x64"
        return "x86"

    def run_pre_install_hook(self, cache_hit: bool) -> None:
        if self.environ.get("VCINSTALLDIR"):
            logger.debug("MSVC developer environment already active")
            return
        self._setup_developer_environment()

    def _setup_developer_environment(self) -> None:
        vs_path = self._find_visual_studio()
        vcvars = vs_path / "VC" / "Auxiliary" / "Build" / "vcvarsall.bat"
        logger.info(f"Loading MSVC environment from {vcvars} ({self.vcvars_arch()})")

        result = run_command(
            ["cmd", "/s", "/c", f'"{vcvars}" {self.vcvars_arch()} >nul && set'],
            env=dict(self.environ),
            capture=True,
        )

        for line in result.stdout.splitlines():
            name, sep, value = line.partition("=")
            if sep and name and self.environ.get(name) != value:
                self.sink.export_variable(name, value)

    def _find_visual_studio(self) -> Path:
        program_files = self.environ.get("ProgramFiles(x86)", r"C:\Program Files (x86)")
        vswhere = (
            Path(program_files) / "Microsoft Visual Studio" / "Installer" / "vswhere.exe"
        )
        cmd = [
            vswhere,
            "-latest",
            "-products",
            "*",
            "-requires",
            "Microsoft.VisualStudio.Component.VC.Tools.x86.x64",
            "-property",
            "installationPath",
        ]
        version_range = VS_VERSION_RANGES.get(self.msvc_year)
        if version_range:
            cmd[1:1] = ["-version", version_range]

        result = run_command(cmd, env=dict(self.environ), capture=True)
        paths = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        if not paths:
            raise ExternalToolError(
                f"No Visual Studio {self.msvc_year} installation with C++ tools found",
                command=cmd,
            )
        return Path(paths[0])

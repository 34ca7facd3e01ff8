"""
Unit tests for Linux platforms.
"""

import pytest
from pathlib import Path
from unittest.mock import patch

from qtsetup.core.exceptions import ExternalToolError
from qtsetup.platforms.linux import SYSTEM_PACKAGES, AndroidPlatform, LinuxPlatform, WasmPlatform


class TestLinuxPlatform:
    """Test the Linux desktop platform."""

    def test_naming(self):
        """Test executable, artifact and module names."""
        platform = LinuxPlatform("gcc_64", "5.15.2", environ={})

        assert platform.build_tool_name() == "qmake"
        assert platform.query_tool_name() == "qmake"
        assert platform.make_tool_name() == "make"
        assert platform.installer_artifact_name() == "qt-unified-linux-x64-online.run"
        assert platform.install_platform_id() == "gcc_64"
        assert platform.install_subdir_name() == "gcc_64"
        assert platform.extra_packages() is None
        assert platform.runner_root() == Path("/home")

    def test_tests_enabled(self):
        """Test desktop builds run tests headless."""
        platform = LinuxPlatform("linux-gcc_64", "5.15.2", environ={})
        assert platform.supports_post_install_tests() is True
        assert platform.test_flags() == "-platform minimal"

    def test_installer_environment(self, tmp_path):
        """Test installer runs with isolated home and no display."""
        platform = LinuxPlatform("gcc_64", "5.15.2", environ={"HOME": "/root", "A": "1"})
        env = platform.installer_environment(tmp_path)

        assert env["HOME"] == str(tmp_path)
        assert env["QT_QPA_PLATFORM"] == "minimal"
        assert env["A"] == "1"

    def test_artifact_subdir(self, tmp_path):
        """Test install directory is below HOME."""
        platform = LinuxPlatform("gcc_64", "5.15.2", environ={"HOME": str(tmp_path)})
        local, published = platform.resolve_artifact_subdir(Path("/opt/qt"))

        assert local == tmp_path / "install"
        assert published == str(tmp_path / "install")

    @patch("qtsetup.platforms.unix.run_command")
    def test_run_installer(self, mock_run, tmp_path):
        """Test installer is made executable and run with the given arguments."""
        installer = tmp_path / "installer.run"
        installer.write_text("")
        installer.chmod(0o644)
        platform = LinuxPlatform("gcc_64", "5.15.2", environ={})

        platform.run_installer(installer, ["--script", "s.qs"], tmp_path / "qt", tmp_path / "home")

        assert installer.stat().st_mode & 0o100
        cmd = mock_run.call_args[0][0]
        assert cmd == [installer, "--script", "s.qs"]
        assert mock_run.call_args[1]["env"]["HOME"] == str(tmp_path / "home")

    @patch("qtsetup.platforms.linux.os.geteuid", return_value=0, create=True)
    @patch("qtsetup.platforms.linux.run_command")
    @patch("qtsetup.platforms.linux.which", return_value=Path("/usr/bin/apt-get"))
    def test_pre_install_hook_installs_libraries(self, _mock_which, mock_run, _mock_euid):
        """Test runtime libraries are installed with apt-get."""
        LinuxPlatform("gcc_64", "5.15.2", environ={}).run_pre_install_hook(False)

        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "/usr/bin/apt-get"
        assert cmd[-len(SYSTEM_PACKAGES) :] == SYSTEM_PACKAGES

    @patch("qtsetup.platforms.linux.run_command")
    @patch("qtsetup.platforms.linux.which", side_effect=ExternalToolError("missing"))
    def test_pre_install_hook_without_apt(self, _mock_which, mock_run):
        """Test the hook is skipped on hosts without apt-get."""
        LinuxPlatform("gcc_64", "5.15.2", environ={}).run_pre_install_hook(True)
        mock_run.assert_not_called()


class TestAndroidPlatform:
    """Test the Android cross platform."""

    @pytest.mark.parametrize(
        "version,expected",
        [("5.15.2", "android"), ("5.14.0", "android"), ("5.13.2", "android_arm64_v8a")],
    )
    def test_module_id_by_version(self, version, expected):
        """Test single-module Android layout since 5.14."""
        platform = AndroidPlatform("android_arm64_v8a", version, environ={})
        assert platform.install_platform_id() == expected

    def test_tests_disabled(self):
        """Test Android binaries are not run on the host."""
        platform = AndroidPlatform("android_arm64", "5.15.2", environ={})
        assert platform.supports_post_install_tests() is False
        assert platform.test_flags() == ""

    def test_export_ndk(self, sink):
        """Test NDK and SDK locations are exported."""
        environ = {"ANDROID_NDK_LATEST_HOME": "/ndk/25", "ANDROID_HOME": "/sdk"}
        platform = AndroidPlatform("android", "5.15.2", environ=environ, sink=sink)

        platform.export_environment(Path("/qt"))

        assert sink.variables == {"ANDROID_NDK_ROOT": "/ndk/25", "ANDROID_SDK_ROOT": "/sdk"}

    def test_export_keeps_existing_ndk(self, sink):
        """Test an already configured NDK is left alone."""
        environ = {"ANDROID_NDK_ROOT": "/ndk/own", "ANDROID_NDK_HOME": "/ndk/other"}
        AndroidPlatform("android", "5.15.2", environ=environ, sink=sink).export_environment(
            Path("/qt")
        )
        assert "ANDROID_NDK_ROOT" not in sink.variables


class TestWasmPlatform:
    """Test the WebAssembly cross platform."""

    def test_naming(self):
        """Test module name and test policy."""
        platform = WasmPlatform("wasm_32", "5.15.2", environ={})
        assert platform.install_platform_id() == "wasm_32"
        assert platform.supports_post_install_tests() is False

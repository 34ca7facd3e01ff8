"""
Unit tests for control script generation.
"""

from pathlib import Path, PureWindowsPath

from qtsetup.installer.request import InstallRequest
from qtsetup.installer.script import generate_script, module_ids, render_install_script
from qtsetup.platforms.linux import LinuxPlatform
from qtsetup.platforms.windows import MingwPlatform


def selected(script: str):
    """Modules selected by a script, in order."""
    return [
        line.strip()[len('widget.selectComponent("') : -len('");')]
        for line in script.splitlines()
        if "selectComponent(" in line
    ]


class TestModuleIds:
    """Test module list construction."""

    def test_base_module_first(self):
        """Test base module, then packages in caller order."""
        request = InstallRequest.from_inputs("5.15.2", "linux-gcc_64", "qtcharts,qtnetworkauth")
        platform = LinuxPlatform(request.platform_key, request.version, environ={})

        assert module_ids(request, platform) == [
            "qt.qt5.5152.gcc_64",
            "qt.qt5.5152.qtcharts",
            "qt.qt5.5152.qtnetworkauth",
        ]

    def test_platform_extras_last(self):
        """Test mandatory platform extras are appended after packages."""
        request = InstallRequest.from_inputs("5.15.2", "mingw81_64", "qtcharts")
        platform = MingwPlatform(request.platform_key, request.version, environ={})

        assert module_ids(request, platform) == [
            "qt.qt5.5152.win64_mingw81",
            "qt.qt5.5152.qtcharts",
            "qt.tools.win64_mingw810",
        ]


class TestGenerateScript:
    """Test script rendering."""

    def test_deterministic(self):
        """Test identical inputs give identical text."""
        modules = ["qt.qt5.5152.gcc_64", "qt.qt5.5152.qtcharts"]
        first = generate_script(Path("/tmp/qt"), modules)
        assert first == generate_script(Path("/tmp/qt"), modules)

    def test_contents(self):
        """Test target directory and modules are embedded."""
        modules = ["qt.qt5.5152.gcc_64", "qt.qt5.5152.qtcharts"]
        script = generate_script(Path("/tmp/run/qt"), modules)

        assert "function Controller()" in script
        assert 'TargetDirectoryLineEdit.setText("/tmp/run/qt");' in script
        assert "widget.deselectAll();" in script
        assert selected(script) == ["qt.qt5.5152.gcc_64", "qt.qt5.5152.qtcharts"]
        assert script.endswith("\n")

    def test_windows_path_uses_forward_slashes(self):
        """Test backslashes never reach the script."""
        script = generate_script(PureWindowsPath("C:\\runner\\temp\\qt"), [])
        assert 'setText("C:/runner/temp/qt");' in script
        assert selected(script) == []

    def test_quotes_are_escaped(self):
        """Test paths are emitted as valid string literals."""
        script = generate_script('/tmp/we"ird', [])
        assert 'setText("/tmp/we\\"ird");' in script

    def test_render_install_script(self):
        """Test full rendering for a request."""
        request = InstallRequest.from_inputs("5.15.2", "gcc_64")
        platform = LinuxPlatform("gcc_64", "5.15.2", environ={})

        script = render_install_script(Path("/w/qt"), request, platform)

        assert selected(script) == ["qt.qt5.5152.gcc_64"]

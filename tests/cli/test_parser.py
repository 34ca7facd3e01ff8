"""
Unit tests for the CLI parser and command dispatch.
"""

import logging
import pytest
from pathlib import Path
from unittest.mock import patch

from qtsetup.cli.parser import CLI
from qtsetup.core.exceptions import ConfigurationError, ExternalToolError


@pytest.fixture
def clean_environ(monkeypatch, tmp_path):
    """No action inputs and no config file in the working directory."""
    for name in (
        "INPUT_VERSION",
        "INPUT_PLATFORM",
        "INPUT_PACKAGES",
        "INPUT_INSTALLER-ARGS",
        "INPUT_INSTALLER_ARGS",
        "INPUT_IARGS",
        "INPUT_CACHEDIR",
        "RUNNER_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestParser:
    """Test argument parsing."""

    def test_install_options(self):
        """Test install inputs are parsed."""
        args = CLI().parse_args(
            ["install", "--qt-version", "5.15.2", "--platform", "gcc_64", "--packages", "qtcharts"]
        )
        assert args.command == "install"
        assert args.version == "5.15.2"
        assert args.platform == "gcc_64"
        assert args.packages == "qtcharts"
        assert args.installer_args is None
        assert args.cachedir is None

    def test_script_requires_install_path(self):
        """Test script command needs --install-path."""
        with pytest.raises(SystemExit):
            CLI().parse_args(["script", "--qt-version", "5.15.2", "--platform", "gcc_64"])

    def test_no_command_shows_help(self, capsys):
        """Test running without command prints help and fails."""
        assert CLI().run([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_version_flag(self, capsys):
        """Test --version prints the package version."""
        with pytest.raises(SystemExit) as exc_info:
            CLI().run(["--version"])
        assert exc_info.value.code == 0
        assert "qtsetup" in capsys.readouterr().out


class TestLogging:
    """Test logging configuration."""

    @patch("qtsetup.cli.commands.install.QtInstaller")
    def test_runner_debug_enables_verbose(self, _mock_installer, clean_environ, monkeypatch):
        """Test RUNNER_DEBUG=1 turns on debug logging."""
        monkeypatch.setenv("RUNNER_DEBUG", "1")
        CLI().run(["install", "--qt-version", "5.15.2", "--platform", "gcc_64"])
        assert logging.getLogger().level == logging.DEBUG

    @patch("qtsetup.cli.commands.install.QtInstaller")
    def test_quiet(self, _mock_installer, clean_environ):
        """Test --quiet logs errors only."""
        CLI().run(["--quiet", "install", "--qt-version", "5.15.2", "--platform", "gcc_64"])
        assert logging.getLogger().level == logging.ERROR


class TestInstallCommand:
    """Test the install command."""

    @patch("qtsetup.cli.commands.install.QtInstaller")
    def test_install_runs_orchestrator(self, mock_installer, clean_environ):
        """Test the request is built from options and installed."""
        exit_code = CLI().run(
            [
                "install",
                "--qt-version",
                "5.15.2",
                "--platform",
                "linux-gcc_64",
                "--packages",
                "qtcharts",
            ]
        )

        assert exit_code == 0
        request = mock_installer.call_args[0][0]
        assert request.version == "5.15.2"
        assert request.platform_key == "linux-gcc_64"
        assert request.packages == ("qtcharts",)
        mock_installer.return_value.install.assert_called_once_with()

    @patch("qtsetup.cli.commands.install.QtInstaller")
    def test_install_from_action_inputs(self, mock_installer, clean_environ, monkeypatch):
        """Test INPUT_* variables supply the inputs."""
        monkeypatch.setenv("INPUT_VERSION", "5.15.2")
        monkeypatch.setenv("INPUT_PLATFORM", "msvc2019_64")

        assert CLI().run(["install"]) == 0
        assert mock_installer.call_args[0][0].platform_key == "msvc2019_64"

    @patch("qtsetup.cli.commands.install.QtInstaller")
    def test_install_from_config_file(self, mock_installer, clean_environ, tmp_path):
        """Test the default config file supplies the inputs."""
        (tmp_path / "qtsetup.yaml").write_text(
            "version: 5.15.2\nplatform: gcc_64\npackages: [qtcharts]\n"
        )

        assert CLI().run(["install"]) == 0
        assert mock_installer.call_args[0][0].packages == ("qtcharts",)

    def test_missing_inputs_fail(self, clean_environ):
        """Test missing inputs exit with an error status."""
        assert CLI().run(["install"]) == 1

    def test_explicit_config_must_exist(self, clean_environ, tmp_path):
        """Test an explicit --config that does not exist is an error."""
        assert CLI().run(["--config", str(tmp_path / "nope.yaml"), "install"]) == 1

    @patch("qtsetup.cli.commands.install.QtInstaller")
    def test_install_failure_exit_code(self, mock_installer, clean_environ):
        """Test installer errors give exit status 1."""
        mock_installer.return_value.install.side_effect = ExternalToolError("installer failed")
        assert CLI().run(["install", "--qt-version", "5.15.2", "--platform", "gcc_64"]) == 1

    @patch("qtsetup.cli.commands.install.QtInstaller")
    def test_unsupported_host_exit_code(self, mock_installer, clean_environ):
        """Test configuration errors give exit status 1."""
        mock_installer.side_effect = ConfigurationError(
            "Install platform 'freebsd' is not supported"
        )
        assert CLI().run(["install", "--qt-version", "5.15.2", "--platform", "gcc_64"]) == 1


class TestScriptCommand:
    """Test the script command."""

    def test_prints_script(self, clean_environ, capsys):
        """Test the control script is printed for the given host."""
        exit_code = CLI().run(
            [
                "script",
                "--qt-version",
                "5.15.2",
                "--platform",
                "mingw81_64",
                "--host",
                "windows",
                "--install-path",
                "C:/Qt",
            ]
        )

        out = capsys.readouterr().out
        assert exit_code == 0
        assert 'setText("C:/Qt");' in out
        assert 'widget.selectComponent("qt.qt5.5152.win64_mingw81");' in out
        assert 'widget.selectComponent("qt.tools.win64_mingw810");' in out

    def test_script_does_not_touch_disk(self, clean_environ, tmp_path, capsys):
        """Test rendering creates no files."""
        CLI().run(
            ["script", "--qt-version", "5.15.2", "--platform", "gcc_64", "--host", "linux",
             "--install-path", str(tmp_path / "qt")]
        )
        assert list(tmp_path.iterdir()) == []
        assert str(Path(tmp_path / "qt")) in capsys.readouterr().out

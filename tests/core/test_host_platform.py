"""
Unit tests for host platform detection.
"""

import pytest
from unittest.mock import patch

from qtsetup.core.exceptions import ConfigurationError
from qtsetup.core.platform import detect_host_os, normalize_host_os


class TestNormalizeHostOs:
    """Test normalize_host_os()."""

    @pytest.mark.parametrize(
        "system,expected",
        [
            ("Linux", "linux"),
            ("linux2", "linux"),
            ("Windows", "windows"),
            ("win32", "windows"),
            ("Darwin", "macos"),
            ("macos", "macos"),
        ],
    )
    def test_supported(self, system, expected):
        """Test supported names are normalized."""
        assert normalize_host_os(system) == expected

    @pytest.mark.parametrize("system", ["FreeBSD", "SunOS", ""])
    def test_unsupported(self, system):
        """Test unsupported hosts raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="not supported"):
            normalize_host_os(system)


class TestDetectHostOs:
    """Test host OS detection."""

    @patch("qtsetup.core.platform.platform.system", return_value="Darwin")
    def test_detect_host_os(self, _mock_system):
        """Test platform.system() is normalized."""
        assert detect_host_os() == "macos"


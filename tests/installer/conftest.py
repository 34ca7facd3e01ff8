"""
Fixtures for installer tests: a fake online installer and patched externals.
"""

import pytest
from pathlib import Path
from unittest.mock import patch

from qtsetup.platforms.unix import UnixPlatform


def fake_download(url, destination, progress_callback=None, timeout=30):
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(b"installer")
    return destination


@pytest.fixture
def mock_download():
    """Patch the installer download."""
    with patch("qtsetup.installer.acquire.download_file", side_effect=fake_download) as mock:
        yield mock


@pytest.fixture
def mock_installer(make_qt_tree):
    """Patch the online installer to lay out <root>/<version>/<subdir>/bin/qmake."""

    def run_installer(self, installer, args, install_root, home_dir):
        root = install_root / self.version / self.install_subdir_name()
        make_qt_tree(root, self.build_tool_name())

    with patch.object(
        UnixPlatform, "run_installer", autospec=True, side_effect=run_installer
    ) as mock:
        yield mock


@pytest.fixture
def mock_qdep():
    """Patch qdep bootstrap and prfgen."""
    with patch("qtsetup.installer.qdep.bootstrap") as bootstrap, patch(
        "qtsetup.installer.qdep.prepare"
    ) as prepare:
        yield bootstrap, prepare

"""
Pytest configuration and shared fixtures for qtsetup tests.
"""

import pytest
from pathlib import Path

from qtsetup.core.runner import MemorySink
from qtsetup.installer.request import InstallRequest


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def sink() -> MemorySink:
    """Output sink recording everything."""
    return MemorySink()


@pytest.fixture
def runner_env(tmp_path: Path) -> dict:
    """Minimal runner environment rooted in tmp_path."""
    (tmp_path / "home").mkdir()
    return {
        "PATH": str(tmp_path / "bin"),
        "HOME": str(tmp_path / "home"),
        "RUNNER_TEMP": str(tmp_path / "runner" / "temp"),
        "RUNNER_TOOL_CACHE": str(tmp_path / "runner" / "toolcache"),
    }


@pytest.fixture
def linux_request() -> InstallRequest:
    """Request for the Linux desktop build of Qt 5.15.2."""
    return InstallRequest.from_inputs("5.15.2", "linux-gcc_64")


@pytest.fixture
def make_qt_tree():
    """Factory creating a minimal Qt installation tree (bin/<qmake>)."""

    def _make(root: Path, qmake: str = "qmake") -> Path:
        bin_dir = root / "bin"
        bin_dir.mkdir(parents=True, exist_ok=True)
        qmake_path = bin_dir / qmake
        qmake_path.write_text("#!/bin/sh\n")
        qmake_path.chmod(0o755)
        return root

    return _make

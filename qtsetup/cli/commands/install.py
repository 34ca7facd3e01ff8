"""
Install command implementation.

Installs or reuses Qt and publishes the step outputs.
"""

import logging

from qtsetup.cli.commands._inputs import request_from_args
from qtsetup.installer.orchestrator import QtInstaller

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    request = request_from_args(args)
    logger.debug(f"Request: {request}")

    result = QtInstaller(request).install()

    state = "cached" if result.cache_hit else "installed"
    logger.info(f"Qt {request.version} ({request.platform_key}) {state} at {result.tool_root}")
    return 0

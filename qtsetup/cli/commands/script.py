"""
Script command implementation.

Prints the installer control script for the given inputs.
"""

import logging

from qtsetup.cli.commands._inputs import request_from_args
from qtsetup.core.platform import detect_host_os
from qtsetup.installer.script import render_install_script
from qtsetup.platforms import select_platform

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the script command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    request = request_from_args(args)
    host = args.host or detect_host_os()
    platform = select_platform(host, request.platform_key, request.version)
    logger.debug(f"Rendering control script for {platform!r} on {host}")

    print(render_install_script(args.install_path, request, platform), end="")
    return 0

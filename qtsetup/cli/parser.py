"""
qtsetup CLI argument parser.

This module implements the command-line interface for qtsetup using argparse.
"""

import argparse
import importlib
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from qtsetup import __version__
from qtsetup.core.exceptions import QtSetupError

logger = logging.getLogger(__name__)


class CLI:
    """qtsetup command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="qtsetup",
            description="qtsetup - Install the Qt SDK on CI runners",
            epilog='Use "qtsetup COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"qtsetup {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./qtsetup.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_script_command(subparsers)

        return parser

    def _add_input_arguments(self, parser):
        """Add the install inputs shared by all subcommands."""
        parser.add_argument(
            "--qt-version",
            dest="version",
            metavar="VERSION",
            help="Qt version to install (e.g., 5.15.2)",
        )
        parser.add_argument(
            "--platform",
            metavar="KEY",
            help="Qt platform key (e.g., gcc_64, msvc2019_64, android_arm64)",
        )
        parser.add_argument(
            "--packages",
            metavar="LIST",
            help="Comma-separated extra modules (e.g., qtcharts,qtwebengine)",
        )
        parser.add_argument(
            "--installer-args",
            dest="installer_args",
            metavar="ARGS",
            help="Space-separated extra arguments for the Qt installer",
        )
        parser.add_argument(
            "--cachedir",
            metavar="PATH",
            help="Shared cache directory for this version and platform",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install or reuse Qt and publish step outputs",
            description="Install Qt (or reuse a cached installation) and publish "
            "qtdir, qmake, make, tests, testflags and installdir",
        )
        self._add_input_arguments(parser)

    def _add_script_command(self, subparsers):
        """Add 'script' subcommand."""
        parser = subparsers.add_parser(
            "script",
            help="Print the installer control script",
            description="Print the control script the Qt installer would be run with",
        )
        self._add_input_arguments(parser)
        parser.add_argument(
            "--install-path",
            type=Path,
            required=True,
            metavar="PATH",
            help="Target directory for the installer",
        )
        parser.add_argument(
            "--host",
            choices=["linux", "windows", "macos"],
            metavar="OS",
            help="Host operating system (linux|windows|macos) [default: detected]",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except QtSetupError as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Runner debug logging (RUNNER_DEBUG=1) counts as --verbose.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if os.environ.get("RUNNER_DEBUG") == "1":
            args.verbose = True

        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "install": "qtsetup.cli.commands.install",
            "script": "qtsetup.cli.commands.script",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()

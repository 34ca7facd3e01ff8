"""
Publishing results to the CI runner.

An output sink receives step outputs, PATH additions and exported environment
variables. ActionsSink speaks the GitHub Actions file-command protocol;
MemorySink only records, for previews and tests.
"""

import logging
import os
import sys
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, MutableMapping, Optional, Union

from qtsetup.core.exceptions import FilesystemError

logger = logging.getLogger(__name__)


class OutputSink(ABC):
    """Destination for outputs, PATH entries and environment variables."""

    @abstractmethod
    def set_output(self, name: str, value: str) -> None:
        """Publish a step output."""
        pass

    @abstractmethod
    def add_path(self, path: Union[str, Path]) -> None:
        """Prepend a directory to PATH for this and later steps."""
        pass

    @abstractmethod
    def export_variable(self, name: str, value: str) -> None:
        """Set an environment variable for this and later steps."""
        pass


class ActionsSink(OutputSink):
    """
    GitHub Actions output sink.

    Values are appended to the files named by GITHUB_OUTPUT, GITHUB_PATH and
    GITHUB_ENV. PATH entries and variables are also applied to the given
    environment so later commands of this run see them.
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def set_output(self, name: str, value: str) -> None:
        value = str(value)
        logger.debug(f"Output {name}={value}")
        if not self._append_command("GITHUB_OUTPUT", _key_value(name, value)):
            # Legacy workflow command for runners without file commands
            sys.stdout.write(f"::set-output name={name}::{value}\n")
            sys.stdout.flush()

    def add_path(self, path: Union[str, Path]) -> None:
        path = str(path)
        logger.debug(f"Adding to PATH: {path}")
        self._append_command("GITHUB_PATH", path + "\n")
        current = self.environ.get("PATH", "")
        self.environ["PATH"] = path + os.pathsep + current if current else path

    def export_variable(self, name: str, value: str) -> None:
        value = str(value)
        logger.debug(f"Exporting {name}={value}")
        self._append_command("GITHUB_ENV", _key_value(name, value))
        self.environ[name] = value

    def _append_command(self, variable: str, text: str) -> bool:
        command_file = self.environ.get(variable)
        if not command_file:
            return False
        try:
            with open(command_file, "a", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise FilesystemError(
                f"Failed to write {variable} file '{command_file}': {e}"
            ) from e
        return True


class MemorySink(OutputSink):
    """Output sink that records everything it receives."""

    def __init__(self):
        self.outputs: Dict[str, str] = {}
        self.paths: List[str] = []
        self.variables: Dict[str, str] = {}

    def set_output(self, name: str, value: str) -> None:
        self.outputs[name] = str(value)

    def add_path(self, path: Union[str, Path]) -> None:
        self.paths.append(str(path))

    def export_variable(self, name: str, value: str) -> None:
        self.variables[name] = str(value)


def _key_value(name: str, value: str) -> str:
    """Format a file-command entry, using a heredoc for multi-line values."""
    if "\n" not in value:
        return f"{name}={value}\n"
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"

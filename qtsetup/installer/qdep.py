"""
qdep integration.

qdep is a qmake dependency manager distributed through pip. It is installed
into the ambient Python before Qt is used, and every fresh Qt installation
gets its qdep.prf generated so projects can load it with CONFIG += qdep.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional

from qtsetup.core.exceptions import ExternalToolError
from qtsetup.core.process import run_command, which

logger = logging.getLogger(__name__)

PYTHON_NAMES = ("python", "python3")


def find_python(path: Optional[str] = None) -> Path:
    """
    Locate the ambient Python interpreter.

    Raises:
        ExternalToolError: If no interpreter is on PATH
    """
    for name in PYTHON_NAMES:
        try:
            return which(name, path=path)
        except ExternalToolError:
            continue
    raise ExternalToolError(f"Unable to locate Python ({', '.join(PYTHON_NAMES)})")


def bootstrap(environ: Optional[Mapping[str, str]] = None) -> None:
    """
    Install qdep with pip.

    Raises:
        ExternalToolError: If Python is missing or pip fails
    """
    path = environ.get("PATH") if environ is not None else None
    python = find_python(path)
    logger.debug(f"Using python: {python}")
    run_command([python, "-m", "pip", "install", "qdep"], env=_child_env(environ))
    logger.info("Installed qdep")


def prepare(qmake: Path, environ: Optional[Mapping[str, str]] = None) -> None:
    """
    Generate qdep's prf file for a qmake installation.

    Raises:
        ExternalToolError: If qdep is missing or prfgen fails
    """
    path = environ.get("PATH") if environ is not None else None
    qdep = which("qdep", path=path)
    run_command([qdep, "prfgen", "--qmake", qmake], env=_child_env(environ))
    logger.info("Successfully prepared qdep")


def _child_env(environ: Optional[Mapping[str, str]]) -> Optional[dict]:
    """Environment for child processes; None inherits the current one."""
    return dict(environ) if environ is not None else None


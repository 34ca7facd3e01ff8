"""
Control script generation for the Qt online installer.

The online installer runs unattended when given a Qt Installer Framework
controller script (--script). The script is rendered from a Jinja2 template
and depends only on the install path and the ordered module list, so the same
inputs always produce byte-identical text.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path, PurePath
from typing import List, Sequence, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from qtsetup.installer.request import InstallRequest
from qtsetup.platforms.base import Platform

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "control_script.qs.j2"


@lru_cache(maxsize=1)
def _jinja_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    # A JSON string literal is a valid JavaScript string literal
    env.filters["js"] = lambda value: json.dumps(str(value))
    return env


def module_ids(request: InstallRequest, platform: Platform) -> List[str]:
    """
    Build the ordered module list for an install.

    Order: the base module of the platform, the caller's packages in the
    order given, then the platform's mandatory extras.

    Example:
        >>> request = InstallRequest.from_inputs("5.15.2", "gcc_64", "qtcharts")
        >>> module_ids(request, LinuxPlatform("gcc_64", "5.15.2"))
        ['qt.qt5.5152.gcc_64', 'qt.qt5.5152.qtcharts']
    """
    modules = [request.module_id(platform.install_platform_id())]
    modules.extend(request.module_id(package) for package in request.packages)
    extras = platform.extra_packages()
    if extras:
        modules.extend(extras)
    return modules


def generate_script(install_path: Union[str, PurePath], modules: Sequence[str]) -> str:
    """
    Render the controller script.

    Args:
        install_path: Target directory of the installation
        modules: Fully qualified module identifiers, selected in this order

    Returns:
        Script text
    """
    # Forward slashes work on every host and need no escaping
    path_text = str(install_path).replace("\\", "/")
    template = _jinja_env().get_template(TEMPLATE_NAME)
    return template.render(install_path=path_text, modules=list(modules))


def render_install_script(
    install_path: Union[str, PurePath], request: InstallRequest, platform: Platform
) -> str:
    """Render the controller script for a request on a platform."""
    modules = module_ids(request, platform)
    logger.debug(f"Selected modules: {', '.join(modules)}")
    return generate_script(install_path, modules)

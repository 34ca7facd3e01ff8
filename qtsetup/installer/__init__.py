"""
Qt installation: data model, cache lookup, acquisition and orchestration.
"""

from .request import (
    TOOL_NAME,
    InstallRequest,
    CacheEntry,
    ResolvedInstall,
)

from .script import (
    module_ids,
    generate_script,
    render_install_script,
)

from .cache import (
    ToolCache,
    CacheResolver,
)

from .acquire import QtAcquirer

from .orchestrator import (
    QtInstaller,
    install_qt,
)

__all__ = [
    "TOOL_NAME",
    "InstallRequest",
    "CacheEntry",
    "ResolvedInstall",
    "module_ids",
    "generate_script",
    "render_install_script",
    "ToolCache",
    "CacheResolver",
    "QtAcquirer",
    "QtInstaller",
    "install_qt",
]

"""
Install-or-reuse orchestration.

QtInstaller makes exactly one decision per run: reuse a cached Qt or acquire
a fresh one. It then puts Qt on PATH, smoke-tests qmake and publishes the
outputs. Step outputs are only written once every step succeeded.
"""

import logging
import os
from pathlib import Path
from typing import MutableMapping, Optional

from qtsetup.core.directory import get_temp_root, get_tool_cache_root
from qtsetup.core.filesystem import create_dir_symlink, ensure_directory, strip_anchor
from qtsetup.core.platform import detect_host_os
from qtsetup.core.process import run_command, which
from qtsetup.core.runner import ActionsSink, OutputSink
from qtsetup.installer import qdep
from qtsetup.installer.acquire import QtAcquirer
from qtsetup.installer.cache import CacheResolver, ToolCache
from qtsetup.installer.request import InstallRequest, ResolvedInstall
from qtsetup.platforms import select_platform

logger = logging.getLogger(__name__)

INSTALL_LINK_NAME = "install_link"


class QtInstaller:
    """
    Orchestrates one Qt installation.

    The platform is selected in the constructor, so an unsupported host fails
    before any directory is created or anything is downloaded.

    Example:
        >>> request = InstallRequest.from_inputs("5.15.2", "gcc_64")
        >>> result = QtInstaller(request).install()
        >>> print(result.tool_root)
        /opt/hostedtoolcache/qt/5.15.2/gcc_64
    """

    def __init__(
        self,
        request: InstallRequest,
        host_os: Optional[str] = None,
        environ: Optional[MutableMapping[str, str]] = None,
        sink: Optional[OutputSink] = None,
        work_dir: Optional[Path] = None,
    ):
        """
        Initialize the installer.

        Args:
            request: What to install
            host_os: Host operating system (default: detected)
            environ: Environment to read settings from (default: os.environ)
            sink: Output sink (default: GitHub Actions sink on environ)
            work_dir: Directory receiving the install_link symlink (default: cwd)

        Raises:
            ConfigurationError: If the host or platform is unsupported
        """
        self.request = request
        self.environ = os.environ if environ is None else environ
        self.sink = sink if sink is not None else ActionsSink(self.environ)
        self.work_dir = Path(work_dir) if work_dir else Path.cwd()

        host = host_os if host_os is not None else detect_host_os()
        self.platform = select_platform(
            host, request.platform_key, request.version, environ=self.environ, sink=self.sink
        )

        runner_root = self.platform.runner_root()
        self.temp_root = get_temp_root(self.environ, runner_root)
        self.tool_cache = ToolCache(get_tool_cache_root(self.environ, runner_root))
        self.resolver = CacheResolver(self.tool_cache)

    def install(self) -> ResolvedInstall:
        """
        Reuse or acquire Qt and publish the result.

        Returns:
            ResolvedInstall describing the published installation

        Raises:
            QtSetupError: On any failure, before any output is set
        """
        request = self.request
        platform = self.platform

        qdep.bootstrap(self.environ)

        entry = self.resolver.resolve(request, platform)
        if entry is not None:
            platform.run_pre_install_hook(True)
            tool_root = entry.location
            tier = "shared cache" if entry.shared else "tool cache"
            logger.debug(f"Using cached Qt from {tier}: {tool_root}")
        else:
            platform.run_pre_install_hook(False)
            logger.debug("Downloading and installing Qt from online installer")
            tool_root = QtAcquirer(
                request, platform, self.tool_cache, self.temp_root, self.environ
            ).acquire()
        logger.info(f"Using Qt installation: {tool_root}")

        self.sink.add_path(tool_root / "bin")
        platform.export_environment(tool_root)

        platform.run_post_install_hook()

        self._smoke_test(tool_root)

        install_dir, published_dir = platform.resolve_artifact_subdir(tool_root)
        link_target = self._link_install_dir(tool_root, install_dir)

        result = ResolvedInstall(
            tool_root=tool_root,
            build_tool_name=platform.build_tool_name(),
            make_tool_name=platform.make_tool_name(),
            test_flags=platform.test_flags(),
            should_test=platform.supports_post_install_tests(),
            install_dir=install_dir,
            published_install_dir=published_dir,
            install_link_target=link_target,
            cache_hit=entry is not None,
        )

        for name, value in result.outputs().items():
            self.sink.set_output(name, value)

        return result

    def _smoke_test(self, tool_root: Path) -> None:
        """Fail if qmake is missing or broken (corrupt cache or install)."""
        path = os.pathsep.join(
            p for p in (str(tool_root / "bin"), self.environ.get("PATH", "")) if p
        )
        qmake = which(self.platform.build_tool_name(), path=path)
        run_command([qmake, "-version"], env=dict(self.environ))

        query = which(self.platform.query_tool_name(), path=path)
        run_command([query, "-query"], env=dict(self.environ))

    def _link_install_dir(self, tool_root: Path, install_dir: Path) -> Path:
        """
        Link install_link to where `make install INSTALL_ROOT=<install_dir>` puts Qt.

        qmake installs below INSTALL_ROOT + the Qt prefix, so the link target
        is <install_dir>/<tool_root without drive or root>/..
        """
        ensure_directory(install_dir)
        target = install_dir / strip_anchor(tool_root) / ".."
        create_dir_symlink(target, self.work_dir / INSTALL_LINK_NAME)
        logger.debug(f"Linked {INSTALL_LINK_NAME} -> {target}")
        return target


def install_qt(
    request: InstallRequest,
    host_os: Optional[str] = None,
    environ: Optional[MutableMapping[str, str]] = None,
    sink: Optional[OutputSink] = None,
) -> ResolvedInstall:
    """
    Convenience function to run one installation.

    Example:
        >>> from qtsetup.installer.orchestrator import install_qt
        >>> install_qt(InstallRequest.from_inputs("5.15.2", "gcc_64"))
    """
    return QtInstaller(request, host_os=host_os, environ=environ, sink=sink).install()

"""
Fresh Qt installation through the online installer.

QtAcquirer runs when neither cache tier has a usable installation:
1. Download the online installer
2. Create an isolated work root with its own home directory
3. Write the generated control script
4. Run the installer unattended
5. Locate the installed <version>/<platform> subtree
6. Generate qdep's prf file for it
7. Move the subtree into the shared cache directory or the tool cache
8. Remove the work root

Any failure aborts the run; the work root is removed and nothing is cached.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional

from qtsetup.core.download import DownloadProgress, download_file
from qtsetup.core.exceptions import FilesystemError
from qtsetup.core.filesystem import (
    atomic_write,
    ensure_directory,
    make_temp_directory,
    move_tree,
    safe_rmtree,
)
from qtsetup.installer import qdep
from qtsetup.installer.cache import ToolCache
from qtsetup.installer.request import TOOL_NAME, InstallRequest
from qtsetup.installer.script import render_install_script
from qtsetup.platforms.base import Platform

logger = logging.getLogger(__name__)

INSTALLER_BASE_URL = "https://download.qt.io/official_releases/online_installers"
SCRIPT_NAME = "qt-installer-script.qs"


class QtAcquirer:
    """
    Downloads, installs and caches Qt.

    Example:
        >>> acquirer = QtAcquirer(request, platform, ToolCache(cache_root), temp_root)
        >>> tool_root = acquirer.acquire()
    """

    def __init__(
        self,
        request: InstallRequest,
        platform: Platform,
        tool_cache: ToolCache,
        temp_root: Path,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.request = request
        self.platform = platform
        self.tool_cache = tool_cache
        self.temp_root = Path(temp_root)
        self.environ = environ

    @property
    def installer_url(self) -> str:
        return f"{INSTALLER_BASE_URL}/{self.platform.installer_artifact_name()}"

    def acquire(self) -> Path:
        """
        Install Qt and store it in the requested cache tier.

        Returns:
            Root of the cached installation

        Raises:
            DownloadError: If the installer cannot be downloaded
            ExternalToolError: If the installer or qdep fails
            FilesystemError: If the result cannot be located or relocated
        """
        work_dir = make_temp_directory(self.temp_root, prefix="qtsetup-")
        logger.debug(f"Work directory: {work_dir}")

        try:
            tool_root = self._install(work_dir)
        except Exception:
            self._cleanup_on_error(work_dir)
            raise

        safe_rmtree(work_dir, require_prefix=self.temp_root)
        return tool_root

    def _install(self, work_dir: Path) -> Path:
        request = self.request
        platform = self.platform

        installer = download_file(
            self.installer_url,
            work_dir / "downloads" / platform.installer_artifact_name(),
            progress_callback=_log_progress,
        )

        home_dir = ensure_directory(work_dir / "home")
        install_root = work_dir / "qt"
        script_path = work_dir / SCRIPT_NAME
        atomic_write(script_path, render_install_script(install_root, request, platform))

        logger.info(f"Running Qt installer for {request.version} ({platform.platform_key})")
        platform.run_installer(
            installer,
            ["--script", str(script_path), *request.installer_args],
            install_root,
            home_dir,
        )
        logger.info(f"Installed Qt {request.version} for {platform.platform_key}")

        subtree = install_root / request.version / platform.install_subdir_name()
        if not subtree.is_dir():
            raise FilesystemError(
                f"Installer finished but {subtree} does not exist; check the "
                f"requested version and platform"
            )

        qdep.prepare(subtree / "bin" / platform.build_tool_name(), self.environ)

        return self._relocate(subtree)

    def _relocate(self, subtree: Path) -> Path:
        request = self.request
        if request.cache_dir is not None:
            logger.info(f"Moving installation to shared cache {request.cache_dir}")
            return move_tree(subtree, request.cache_dir)

        return self.tool_cache.cache_dir(
            subtree, TOOL_NAME, request.version, request.platform_key
        )

    def _cleanup_on_error(self, work_dir: Path) -> None:
        logger.info("Cleaning up after error...")
        try:
            safe_rmtree(work_dir, require_prefix=self.temp_root)
        except (FilesystemError, ValueError) as e:
            logger.warning(f"Failed to remove work directory {work_dir}: {e}")


def _log_progress(progress: DownloadProgress) -> None:
    logger.info(f"  {progress}")

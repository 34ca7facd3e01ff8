"""
Cache lookup for Qt installations.

Two tiers can hold an installation:

- The runner tool cache, keyed by (tool, version, platform key). Entries are
  only ever written by a successful acquisition and carry a completion
  marker, so a present marker means a complete installation.
- A shared cache directory supplied by the caller. It is trusted by content:
  the caller keeps one directory per version and platform, and a directory
  containing bin/<qmake> counts as a hit.

Neither tier is locked; the caller ensures a single writer per key.
"""

import logging
from pathlib import Path
from typing import Optional

from packaging.version import InvalidVersion, Version

from qtsetup.core.exceptions import FilesystemError
from qtsetup.core.filesystem import atomic_write, ensure_directory, move_tree, safe_rmtree
from qtsetup.installer.request import TOOL_NAME, CacheEntry, InstallRequest
from qtsetup.platforms.base import Platform

logger = logging.getLogger(__name__)


class ToolCache:
    """
    Runner-local tool cache.

    Layout:
        <root>/<tool>/<version>/<key>/            cached tree
        <root>/<tool>/<version>/<key>.complete    completion marker

    Example:
        >>> cache = ToolCache(Path("/opt/hostedtoolcache"))
        >>> cache.find("qt", "5.15.2", "gcc_64")
        PosixPath('/opt/hostedtoolcache/qt/5.15.2/gcc_64')
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def entry_dir(self, tool: str, version: str, key: str) -> Path:
        return self.root / tool / version / key

    def marker_path(self, tool: str, version: str, key: str) -> Path:
        return self.root / tool / version / f"{key}.complete"

    def find(self, tool: str, version: str, key: str) -> Optional[Path]:
        """
        Find a cached tree.

        Only explicit versions are looked up; a version range never matches.

        Returns:
            Path of the cached tree, or None
        """
        if not _is_explicit_version(version):
            logger.debug(f"Not an explicit version, skipping tool cache: {version}")
            return None

        entry = self.entry_dir(tool, version, key)
        if entry.is_dir() and self.marker_path(tool, version, key).is_file():
            logger.debug(f"Found in tool cache: {entry}")
            return entry

        logger.debug(f"Not in tool cache: {tool} {version} {key}")
        return None

    def cache_dir(self, source: Path, tool: str, version: str, key: str) -> Path:
        """
        Move a tree into the cache.

        A stale entry without marker is replaced.

        Returns:
            Canonical path of the cached tree

        Raises:
            FilesystemError: If the tree cannot be stored
        """
        entry = self.entry_dir(tool, version, key)
        marker = self.marker_path(tool, version, key)

        logger.info(f"Caching {source} as {tool} {version} {key}")

        ensure_directory(entry.parent)
        marker.unlink(missing_ok=True)
        if entry.exists():
            safe_rmtree(entry, require_prefix=self.root)

        move_tree(source, entry)
        atomic_write(marker, "")

        return entry


class CacheResolver:
    """
    Decide whether an installation already exists, and where.

    Never acquires anything itself.
    """

    def __init__(self, tool_cache: ToolCache):
        self.tool_cache = tool_cache

    def resolve(self, request: InstallRequest, platform: Platform) -> Optional[CacheEntry]:
        """
        Look for a usable installation.

        With a shared cache directory only that directory is checked;
        otherwise the tool cache is queried.

        Returns:
            CacheEntry on a hit, None on a miss
        """
        if request.cache_dir is not None:
            return self._resolve_shared(request, platform)

        location = self.tool_cache.find(TOOL_NAME, request.version, request.platform_key)
        if location is None:
            return None
        return CacheEntry(TOOL_NAME, request.version, request.platform_key, location)

    def _resolve_shared(
        self, request: InstallRequest, platform: Platform
    ) -> Optional[CacheEntry]:
        qmake = request.cache_dir / "bin" / platform.build_tool_name()
        if not qmake.is_file():
            logger.debug(f"Shared cache has no {qmake}")
            return None

        try:
            location = request.cache_dir.resolve()
        except OSError as e:
            raise FilesystemError(f"Cannot resolve {request.cache_dir}: {e}") from e

        # Trusted by content, the directory itself is not checked against the version
        logger.debug(f"Shared cache hit, trusting {location} for Qt {request.version}")
        return CacheEntry(
            TOOL_NAME, request.version, request.platform_key, location, shared=True
        )


def _is_explicit_version(version: str) -> bool:
    try:
        Version(version)
    except InvalidVersion:
        return False
    return True

"""
Data model of one install-or-reuse run.

InstallRequest is fixed for the whole run and is passed explicitly to every
step. ResolvedInstall is the terminal result that gets published.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from packaging.version import InvalidVersion, Version

from qtsetup.core.exceptions import ConfigurationError, InvalidVersionError

TOOL_NAME = "qt"

# Platform module ids and install directories follow the Qt 5 installer layout
SUPPORTED_QT_MAJOR = 5


def _unique(items: Iterable[str]) -> Tuple[str, ...]:
    """Strip entries, drop blanks and duplicates, keep first-seen order."""
    seen = []
    for item in items:
        item = item.strip()
        if item and item not in seen:
            seen.append(item)
    return tuple(seen)


@dataclass(frozen=True)
class InstallRequest:
    """
    Everything the caller asked for.

    Attributes:
        version: Qt release version (e.g., '5.15.2')
        platform_key: Qt platform key (e.g., 'gcc_64', 'linux-gcc_64', 'android_arm64')
        packages: Extra Qt modules, in caller order (e.g., ('qtcharts',))
        installer_args: Extra command line arguments for the online installer
        cache_dir: Shared cache directory, or None for the runner tool cache
    """

    version: str
    platform_key: str
    packages: Tuple[str, ...] = ()
    installer_args: Tuple[str, ...] = ()
    cache_dir: Optional[Path] = None

    def __post_init__(self):
        try:
            parsed = Version(self.version)
        except InvalidVersion:
            raise InvalidVersionError(self.version) from None
        if len(parsed.release) < 2 or parsed.local or str(parsed) != self.version:
            raise InvalidVersionError(self.version)
        if parsed.major != SUPPORTED_QT_MAJOR:
            raise ConfigurationError(
                f"Qt {self.version} is not supported: module and directory layouts "
                f"are only known for Qt {SUPPORTED_QT_MAJOR}"
            )

    @classmethod
    def from_inputs(
        cls,
        version: str,
        platform: str,
        packages: str = "",
        installer_args: str = "",
        cache_dir: str = "",
    ) -> "InstallRequest":
        """
        Build a request from raw action inputs.

        Example:
            >>> request = InstallRequest.from_inputs("5.15.2", "gcc_64", "qtcharts")
            >>> request.packages
            ('qtcharts',)
        """
        return cls(
            version=version.strip(),
            platform_key=platform.strip(),
            packages=_unique((packages or "").split(",")),
            installer_args=tuple(a for a in (installer_args or "").split(" ") if a),
            cache_dir=Path(cache_dir.strip()) if cache_dir and cache_dir.strip() else None,
        )

    @property
    def qt_major(self) -> int:
        return Version(self.version).major

    @property
    def version_tag(self) -> str:
        """Version without dots, as used in module identifiers ('5152')."""
        return self.version.replace(".", "")

    @property
    def module_namespace(self) -> str:
        """Module namespace for this major version ('qt.qt5')."""
        return f"{TOOL_NAME}.qt{self.qt_major}"

    def module_id(self, name: str) -> str:
        """
        Fully qualified module identifier.

        Example:
            >>> InstallRequest("5.15.2", "gcc_64").module_id("gcc_64")
            'qt.qt5.5152.gcc_64'
        """
        return f"{self.module_namespace}.{self.version_tag}.{name}"


@dataclass(frozen=True)
class CacheEntry:
    """A usable installation found in one of the cache tiers."""

    tool: str
    version: str
    platform_key: str
    location: Path
    shared: bool = False


@dataclass(frozen=True)
class ResolvedInstall:
    """Result of a successful run."""

    tool_root: Path
    build_tool_name: str
    make_tool_name: str
    test_flags: str
    should_test: bool
    install_dir: Path
    published_install_dir: str
    install_link_target: Path
    cache_hit: bool

    def outputs(self) -> Dict[str, str]:
        """Step outputs in publishing order."""
        return {
            "qtdir": str(self.tool_root),
            "qmake": self.build_tool_name,
            "make": self.make_tool_name,
            "tests": "true" if self.should_test else "false",
            "testflags": self.test_flags,
            "installdir": self.published_install_dir,
        }

"""
Cross-platform file system utilities for qtsetup.

This module provides the filesystem primitives the installer relies on:
- Safe file operations (atomic writes, guarded deletion)
- Tree relocation (move into caches)
- Directory symlink creation

Every failure is reported as FilesystemError.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from qtsetup.core.exceptions import FilesystemError

IS_WINDOWS = os.name == "nt"


# ============================================================================
# Path Utilities
# ============================================================================


def strip_anchor(path: Union[str, Path]) -> Path:
    """
    Remove the drive/root prefix of an absolute path.

    '/opt/qt/5.15.2' becomes 'opt/qt/5.15.2' and 'C:\\Qt\\5.15.2' becomes
    'Qt\\5.15.2'. Used to graft an absolute prefix below another directory,
    the way `make install INSTALL_ROOT=...` does.

    Example:
        >>> strip_anchor(Path("/opt/qt"))
        PosixPath('opt/qt')
    """
    path = Path(path)
    if not path.anchor:
        return path
    return path.relative_to(path.anchor)


def is_empty_directory(path: Union[str, Path]) -> bool:
    """Return True if path is an existing directory with no entries."""
    path = Path(path)
    if not path.is_dir():
        return False
    return not any(path.iterdir())


# ============================================================================
# Directory Operations
# ============================================================================


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Create a directory (and parents) if it does not exist.

    Raises:
        FilesystemError: If the directory cannot be created
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Failed to create directory '{path}': {e}") from e
    return path


def make_temp_directory(parent: Union[str, Path], prefix: str = "qtsetup-") -> Path:
    """
    Create a fresh, uniquely named directory below parent.

    Raises:
        FilesystemError: If parent cannot be created or is not writable
    """
    parent = ensure_directory(parent)
    try:
        return Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
    except OSError as e:
        raise FilesystemError(
            f"Failed to create temporary directory in '{parent}': {e}"
        ) from e


def move_tree(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Move a directory tree so that it becomes destination.

    Parent directories of destination are created. An existing empty
    destination directory is replaced; any other existing destination is an
    error, so the moved tree never ends up nested inside it.

    Returns:
        Absolute path of the moved tree

    Raises:
        FilesystemError: If source is missing, destination is occupied, or
            the move fails
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_dir():
        raise FilesystemError(f"Cannot move '{source}': not a directory")

    if destination.exists() or destination.is_symlink():
        if not is_empty_directory(destination):
            raise FilesystemError(
                f"Cannot move '{source}' to '{destination}': destination exists "
                f"and is not an empty directory"
            )
        try:
            destination.rmdir()
        except OSError as e:
            raise FilesystemError(f"Failed to replace '{destination}': {e}") from e

    ensure_directory(destination.parent)

    try:
        shutil.move(str(source), str(destination))
    except (OSError, shutil.Error) as e:
        # A failed cross-device move can leave a partial copy behind
        if destination.exists():
            shutil.rmtree(destination, ignore_errors=True)
        raise FilesystemError(
            f"Failed to move '{source}' to '{destination}': {e}"
        ) from e

    return destination.resolve()


def create_dir_symlink(target: Union[str, Path], link: Union[str, Path]) -> Path:
    """
    Create (or replace) a directory symlink at link pointing to target.

    The target does not need to exist yet.

    Raises:
        FilesystemError: If the link path is occupied by a real file or
            directory, or the symlink cannot be created
    """
    link = Path(link)

    if link.is_symlink():
        link.unlink()
    elif link.exists():
        raise FilesystemError(
            f"Cannot create symlink '{link}': path exists and is not a symlink"
        )

    try:
        os.symlink(str(target), str(link), target_is_directory=True)
    except OSError as e:
        raise FilesystemError(
            f"Failed to create symlink '{link}' -> '{target}': {e}"
        ) from e

    return link


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    This ensures the file is never in a partially-written state.
    If the write fails, the original file (if any) remains unchanged.

    Raises:
        FilesystemError: If the file cannot be written

    Example:
        >>> atomic_write('qt-installer-script.qs', 'function Controller() {}')
    """
    file_path = Path(file_path)
    ensure_directory(file_path.parent)

    try:
        # Temp file in same directory keeps the rename on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise FilesystemError(f"Failed to write '{file_path}': {e}") from e

    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding, newline="\n") as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise FilesystemError(f"Failed to write '{file_path}': {e}") from e


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('/runner/temp/qtsetup-x1y2', require_prefix='/runner/temp')
        >>> safe_rmtree('/usr/bin', require_prefix='/home')  # ValueError
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not path.is_relative_to(require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, path, exc_info):
                """Error handler for Windows read-only files."""
                if not os.access(path, os.W_OK):
                    os.chmod(path, 0o777)
                    func(path)
                else:
                    raise exc_info[1]

            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)

    except Exception as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e

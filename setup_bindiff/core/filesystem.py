"""
File system utilities for setup-bindiff.

This module provides the file operations the installer is built from:
- Zip extraction with directory traversal protection
- Moving release files into the install layout
- Marking executables, atomic writes, tree copies
- Executable lookup on a search path
"""

import os
import shutil
import stat
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from setup_bindiff.core.exceptions import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
)

IS_WINDOWS = os.name == "nt"

WINDOWS_EXTENSIONS = ("", ".exe", ".bat", ".cmd")


# ============================================================================
# Path Utilities
# ============================================================================


def find_executable(
    name: str,
    search_path: Optional[str] = None,
    extensions: Optional[Sequence[str]] = None,
) -> Optional[Path]:
    """
    Find an executable on a search path.

    Args:
        name: Executable name (e.g., 'ida')
        search_path: PATH-style string; defaults to the process PATH
        extensions: Suffixes to try; defaults to the Windows set on Windows

    Returns:
        Path to executable if found, None otherwise

    Example:
        >>> find_executable('ida', "/opt/ida:/usr/bin")
        PosixPath('/opt/ida/ida')
    """
    if extensions is None:
        extensions = WINDOWS_EXTENSIONS if IS_WINDOWS else ("",)

    if search_path is None:
        search_path = os.environ.get("PATH", "")

    for directory in search_path.split(os.pathsep):
        if not directory:
            continue
        for ext in extensions:
            exe_path = Path(directory) / f"{name}{ext}"
            if exe_path.is_file() and os.access(exe_path, os.X_OK):
                return exe_path

    return None


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists (idempotent).

    Example:
        >>> ensure_directory('/tmp/BinDiff-latest/bin')
        PosixPath('/tmp/BinDiff-latest/bin')
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def directory_size(path: Union[str, Path]) -> int:
    """Calculate total size of a directory in bytes."""
    return sum(item.stat().st_size for item in Path(path).rglob("*") if item.is_file())


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(member: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / member).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{member}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_zip(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> Path:
    """
    Extract a zip archive to a destination directory.

    All member paths are validated before anything is written.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to (created if missing)
        progress_callback: Optional callback(current, total) for progress

    Returns:
        The destination directory

    Raises:
        ArchiveExtractionError: If the archive is missing or corrupt
        InsecureArchiveError: If the archive contains malicious paths
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = zf.namelist()
            total = len(members)

            for member in members:
                _validate_archive_path(member, destination)

            for i, member in enumerate(members):
                zf.extract(member, destination)
                if progress_callback:
                    progress_callback(i + 1, total)
    except InsecureArchiveError:
        raise
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e

    return destination


# ============================================================================
# Safe File Operations
# ============================================================================


def move_file(source: Union[str, Path], destination_dir: Union[str, Path]) -> Path:
    """
    Move a file into a directory, replacing any file with the same name.

    Args:
        source: File to move
        destination_dir: Existing directory to move it into

    Returns:
        New path of the file

    Raises:
        FilesystemError: If the source is missing or the move fails
    """
    source = Path(source)
    destination_dir = Path(destination_dir)

    if not source.exists():
        raise FilesystemError(f"Source does not exist: {source}")

    target = destination_dir / source.name
    try:
        if target.exists():
            target.unlink()
        shutil.move(str(source), str(target))
    except OSError as e:
        raise FilesystemError(f"Failed to move {source} to {destination_dir}: {e}") from e

    return target


def make_executable(path: Union[str, Path]) -> None:
    """
    Add execute permission bits for user, group and others.

    Raises:
        FilesystemError: If the file is missing or permissions cannot be set
    """
    path = Path(path)
    try:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        raise FilesystemError(f"Failed to mark {path} as executable: {e}") from e


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    The file is never observed in a partially-written state.

    Example:
        >>> atomic_write('registry.json', '{"version": 1}')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Remove a directory tree, optionally refusing paths outside ``require_prefix``.

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails
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
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def copy_tree(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Recursively copy a directory tree, preserving file metadata.

    Raises:
        FilesystemError: If the source is not a directory
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_dir():
        raise FilesystemError(f"Source is not a directory: {source}")

    shutil.copytree(source, destination, dirs_exist_ok=True)


__all__ = [
    "WINDOWS_EXTENSIONS",
    "find_executable",
    "ensure_directory",
    "directory_size",
    "extract_zip",
    "move_file",
    "make_executable",
    "atomic_write",
    "safe_rmtree",
    "copy_tree",
]

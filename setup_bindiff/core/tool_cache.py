"""
Persistent tool cache for installed BinDiff trees.

Installed directories are stored as ``<root>/<tool>/<version>/<arch>`` next to
an ``<arch>.complete`` marker, the same layout CI runners use for their hosted
tool cache, so entries written here are found again by later jobs on the same
runner. A ``registry.json`` at the cache root records where each entry came
from; writes to it are serialized with a file lock.
"""

import json
import logging
import os
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

from filelock import FileLock, Timeout

from setup_bindiff.core.exceptions import CacheError, CacheLockTimeout
from setup_bindiff.core.filesystem import (
    atomic_write,
    copy_tree,
    directory_size,
    safe_rmtree,
)
from setup_bindiff.core.interfaces import CacheStore

logger = logging.getLogger(__name__)

TOOL_CACHE_ENV = "RUNNER_TOOL_CACHE"


def default_cache_root(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the tool cache root.

    Returns:
        $RUNNER_TOOL_CACHE when set, otherwise ~/.setup-bindiff/tool-cache
    """
    environ = os.environ if environ is None else environ
    configured = environ.get(TOOL_CACHE_ENV)
    if configured:
        return Path(configured)
    return Path.home() / ".setup-bindiff" / "tool-cache"


class ToolCache(CacheStore):
    """
    Directory-based tool cache with a locked registry.

    Example:
        >>> cache = ToolCache(Path("/opt/hostedtoolcache"))
        >>> cache.find("BinDiff", "latest")
        >>> cache.cache_dir(Path("/tmp/BinDiff-latest"), "BinDiff", "latest")
        PosixPath('/opt/hostedtoolcache/BinDiff/latest/x64')
    """

    def __init__(self, root: Optional[Path] = None, lock_timeout: int = 60):
        """
        Initialize tool cache.

        Args:
            root: Cache root directory (default: see default_cache_root)
            lock_timeout: Timeout in seconds for acquiring the cache lock
        """
        self.root = Path(root) if root is not None else default_cache_root()
        self.registry_path = self.root / "registry.json"
        self.lock_path = self.root / "lock" / "cache.lock"
        self.lock_timeout = lock_timeout

        logger.debug(f"Initialized tool cache at {self.root}")

    def entry_dir(self, tool_name: str, version: str, arch: str = "x64") -> Path:
        """Get the directory an entry lives in, whether or not it exists."""
        if not tool_name:
            raise ValueError("tool_name cannot be empty")
        if not version:
            raise ValueError("version cannot be empty")
        return self.root / tool_name / version / arch

    def _marker(self, entry_dir: Path) -> Path:
        return entry_dir.parent / f"{entry_dir.name}.complete"

    def find(self, tool_name: str, version: str, arch: str = "x64") -> Optional[Path]:
        entry_dir = self.entry_dir(tool_name, version, arch)

        if entry_dir.is_dir() and self._marker(entry_dir).exists():
            logger.debug(f"Cache hit: {entry_dir}")
            return entry_dir

        logger.debug(f"Cache miss: {tool_name} {version} {arch}")
        return None

    def cache_dir(
        self, source_dir: Path, tool_name: str, version: str, arch: str = "x64"
    ) -> Path:
        source_dir = Path(source_dir)
        entry_dir = self.entry_dir(tool_name, version, arch)
        marker = self._marker(entry_dir)

        if not source_dir.is_dir():
            raise CacheError(f"Cannot cache {source_dir}: not a directory")

        with self._lock():
            logger.debug(f"Caching {source_dir} -> {entry_dir}")

            marker.unlink(missing_ok=True)
            safe_rmtree(entry_dir, require_prefix=self.root)
            try:
                copy_tree(source_dir, entry_dir)
            except OSError as e:
                raise CacheError(f"Failed to cache {source_dir}: {e}") from e

            self._record(tool_name, version, arch, source_dir, entry_dir)

            # marker last: an entry is only found once everything above succeeded
            try:
                marker.write_text("")
            except OSError as e:
                raise CacheError(f"Failed to complete cache entry {entry_dir}: {e}") from e

        return entry_dir

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def _load_registry(self) -> dict:
        """
        Load registry from disk.

        An unreadable or malformed registry is replaced with an empty one.

        Returns:
            Registry data dictionary
        """
        if not self.registry_path.exists():
            return {"version": 1, "entries": {}}

        try:
            with open(self.registry_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load cache registry, resetting: {e}")
            return {"version": 1, "entries": {}}

        if not isinstance(data, dict) or "version" not in data or "entries" not in data:
            logger.warning("Invalid cache registry format, resetting")
            return {"version": 1, "entries": {}}

        return data

    def _record(
        self,
        tool_name: str,
        version: str,
        arch: str,
        source_dir: Path,
        entry_dir: Path,
    ) -> None:
        data = self._load_registry()
        data["entries"][f"{tool_name}/{version}/{arch}"] = {
            "path": str(entry_dir),
            "source": str(source_dir),
            "size_bytes": directory_size(entry_dir),
            "cached": datetime.now().isoformat(),
        }

        try:
            atomic_write(
                self.registry_path, json.dumps(data, indent=2, ensure_ascii=False)
            )
        except OSError as e:
            raise CacheError(f"Failed to save cache registry: {e}") from e

    @contextmanager
    def _lock(self):
        """
        Hold the exclusive cache lock.

        Raises:
            CacheLockTimeout: If lock cannot be acquired within timeout
        """
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)

        lock = FileLock(self.lock_path, timeout=self.lock_timeout)

        try:
            with lock:
                yield
        except Timeout as e:
            logger.error(f"Failed to acquire cache lock within {self.lock_timeout}s")
            raise CacheLockTimeout(
                f"Could not acquire cache lock within {self.lock_timeout} seconds"
            ) from e

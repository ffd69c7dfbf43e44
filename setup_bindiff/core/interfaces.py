"""
Collaborator interfaces for the installer workflow.

The workflow only talks to the network, the tool cache, and external processes
through these contracts. The concrete implementations live next to them in
``setup_bindiff.core``; tests substitute doubles.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence


class CacheStore(ABC):
    """Persistent cache of installed tool directories keyed by name and version."""

    @abstractmethod
    def find(self, tool_name: str, version: str, arch: str = "x64") -> Optional[Path]:
        """
        Look up a cached installation.

        Args:
            tool_name: Tool name (e.g., "BinDiff")
            version: Exact version selector (e.g., "latest", "v8")
            arch: Architecture the installation was built for

        Returns:
            Path to the cached directory, or None on a miss
        """
        pass

    @abstractmethod
    def cache_dir(
        self, source_dir: Path, tool_name: str, version: str, arch: str = "x64"
    ) -> Path:
        """
        Store a directory in the cache.

        Args:
            source_dir: Directory to store
            tool_name: Tool name
            version: Version selector the directory was installed for
            arch: Architecture the installation was built for

        Returns:
            Path of the cached copy
        """
        pass


class ArchiveFetcher(ABC):
    """Retrieves and unpacks release archives."""

    @abstractmethod
    def download(self, url: str) -> Path:
        """Download ``url`` to a scratch location and return the file path."""
        pass

    @abstractmethod
    def extract_zip(self, archive_path: Path) -> Path:
        """Extract a zip archive to a fresh scratch directory and return it."""
        pass


class ProcessRunner(ABC):
    """Runs external tools to completion."""

    @abstractmethod
    def run(self, tool: Path, args: Sequence[str]) -> int:
        """
        Run ``tool`` with ``args``.

        Returns:
            Exit code (always 0; failures raise ProcessError)
        """
        pass


__all__ = [
    "CacheStore",
    "ArchiveFetcher",
    "ProcessRunner",
]

"""
Release lookup and retrieval.

Resolves a version selector to a release asset URL and fetches it, short
circuiting on a tool cache hit before any network access.
"""

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from setup_bindiff.core.download import DownloadProgress, download_file
from setup_bindiff.core.filesystem import extract_zip
from setup_bindiff.core.interfaces import ArchiveFetcher, CacheStore
from setup_bindiff.core.platform import HostEnvironment, PlatformInfo
from setup_bindiff.installer.layout import ArchiveLayout

logger = logging.getLogger(__name__)

BASE_URL = "https://github.com/cs2-analysis/bindiff"
LATEST = "latest"


def asset_name(platform: PlatformInfo) -> str:
    """
    Get the release asset file name for a platform.

    Example:
        >>> asset_name(PlatformInfo("linux", "Linux"))
        'BinDiff-Linux.zip'
    """
    return f"{ArchiveLayout.root_name(platform.label)}.zip"


def resolve_url(version: str, platform: PlatformInfo, base_url: str = BASE_URL) -> str:
    """
    Build the download URL of a release asset.

    ``latest`` uses the floating ``latest/download`` redirect; any other
    selector is treated as a release tag.

    Example:
        >>> resolve_url("v8", PlatformInfo("linux", "Linux"))
        'https://github.com/cs2-analysis/bindiff/releases/download/v8/BinDiff-Linux.zip'
    """
    version_part = "latest/download" if version == LATEST else f"download/{version}"
    return f"{base_url}/releases/{version_part}/{asset_name(platform)}"


@dataclass
class FetchResult:
    """Result of fetch_or_reuse()."""

    path: Path
    """Cached install root on a hit, extraction root otherwise"""

    was_cached: bool
    """Whether the path came from the tool cache"""

    url: Optional[str] = None
    """URL the archive was downloaded from (None on a cache hit)"""


class ReleaseArchiveFetcher(ArchiveFetcher):
    """
    Downloads and extracts release archives into the runner scratch space.

    RUNNER_TEMP is resolved on first use so that a cache hit never needs it.
    """

    def __init__(self, host: HostEnvironment):
        self.host = host

    @property
    def scratch_dir(self) -> Path:
        return Path(self.host.require("RUNNER_TEMP"))

    def download(self, url: str) -> Path:
        destination = self.scratch_dir / f"{uuid.uuid4()}.zip"

        def log_progress(progress: DownloadProgress):
            logger.debug(f"Downloaded {progress}")

        return download_file(url, destination, progress_callback=log_progress)

    def extract_zip(self, archive_path: Path) -> Path:
        destination = self.scratch_dir / str(uuid.uuid4())

        def log_progress(current: int, total: int):
            if current == total or current % 50 == 0:
                logger.debug(f"Extracted {current}/{total} files")

        return extract_zip(archive_path, destination, progress_callback=log_progress)


class ReleaseFetcher:
    """
    Fetches a BinDiff release, reusing the tool cache when possible.

    Example:
        >>> fetcher = ReleaseFetcher(platform_info, ToolCache(), ReleaseArchiveFetcher(host))
        >>> result = fetcher.fetch_or_reuse("BinDiff", "latest")
        >>> result.was_cached
        False
    """

    def __init__(
        self, platform: PlatformInfo, cache: CacheStore, archives: ArchiveFetcher
    ):
        self.platform = platform
        self.cache = cache
        self.archives = archives

    def fetch_or_reuse(self, tool_name: str, version: str) -> FetchResult:
        """
        Get an install root for ``tool_name`` at ``version``.

        Returns:
            FetchResult pointing at the cached install on a hit, or at the
            freshly extracted archive root on a miss

        Raises:
            DownloadError: If the archive cannot be downloaded
            ArchiveExtractionError: If the archive cannot be extracted
        """
        logger.info(f"Checking cache for {tool_name} version {version}")
        cache_path = self.cache.find(tool_name, version, self.platform.arch)
        if cache_path:
            logger.info(f"Found in cache: {cache_path}")
            return FetchResult(path=Path(cache_path), was_cached=True)

        logger.info("Not found in cache")

        url = resolve_url(version, self.platform)

        logger.info(f"Downloading {tool_name} version {version} from {url}")
        download_path = self.archives.download(url)
        logger.debug(f"Download path: {download_path}")

        logger.info(f"Extracting {download_path}")
        extract_path = self.archives.extract_zip(download_path)
        logger.debug(f"Extract path: {extract_path}")

        return FetchResult(path=Path(extract_path), was_cached=False, url=url)

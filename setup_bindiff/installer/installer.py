"""
Install layout assembly.

Rearranges an extracted release into the canonical install tree::

    BinDiff-<version>/
        bin/                    bindiff, bindiff_config_setup, binexport2dump
        Plugins/IDA Pro/        (plugins/idapro on Linux)
        Plugins/Binary Ninja/   (plugins/binaryninja on Linux)

and stores the result in the tool cache.
"""

import logging
from pathlib import Path

from setup_bindiff.core.exceptions import FilesystemError, InstallError
from setup_bindiff.core.filesystem import ensure_directory, make_executable, move_file
from setup_bindiff.core.interfaces import CacheStore
from setup_bindiff.core.platform import HostEnvironment, PlatformInfo
from setup_bindiff.installer.layout import LAYOUT, TOOL_NAME, ArchiveLayout

logger = logging.getLogger(__name__)


class Installer:
    """Builds the install tree from an extracted release and caches it."""

    def __init__(
        self,
        platform: PlatformInfo,
        host: HostEnvironment,
        cache: CacheStore,
        layout: ArchiveLayout = LAYOUT,
        tool_name: str = TOOL_NAME,
    ):
        self.platform = platform
        self.host = host
        self.cache = cache
        self.layout = layout
        self.tool_name = tool_name

    def output_dir(self, version: str) -> Path:
        """
        Get the scratch directory the install tree is assembled in.

        Raises:
            MissingEnvironmentError: If RUNNER_TEMP is not set
        """
        return Path(self.host.require("RUNNER_TEMP")) / f"{self.tool_name}-{version}"

    def install(self, extract_root: Path, version: str) -> Path:
        """
        Assemble the install tree and register it in the tool cache.

        Args:
            extract_root: Directory the release archive was extracted to
            version: Version selector the tree is cached under

        Returns:
            Path of the cached install

        Raises:
            MissingEnvironmentError: If RUNNER_TEMP is not set
            InstallError: If a release file is missing or cannot be moved
        """
        release_dir = Path(extract_root) / self.layout.root_name(self.platform.label)
        output_path = self.output_dir(version)
        logger.debug(f"Output path: {output_path}")

        logger.info(f"Installing to {output_path}")
        bin_dir = ensure_directory(output_path / "bin")

        for item in self.layout.executables:
            self._move(release_dir / item.subdir / self.platform.exe_name(item.name), bin_dir)

        for app_name, plugin_files in self.layout.plugins:
            plugin_dir = ensure_directory(self.platform.plugins_dir(output_path, app_name))
            for item in plugin_files:
                self._move(
                    release_dir / item.subdir / self.platform.library_name(item.name),
                    plugin_dir,
                )

        if self.platform.needs_chmod:
            for name in self.layout.executable_names:
                make_executable(bin_dir / self.platform.exe_name(name))

        logger.info(f"Caching {self.tool_name} in tool cache ({version})")
        cache_path = self.cache.cache_dir(
            output_path, self.tool_name, version, self.platform.arch
        )
        logger.debug(f"Cache path: {cache_path}")

        return Path(cache_path)

    def _move(self, source: Path, destination_dir: Path) -> None:
        try:
            move_file(source, destination_dir)
        except FilesystemError as e:
            raise InstallError(f"Failed to install {source.name}: {e}") from e

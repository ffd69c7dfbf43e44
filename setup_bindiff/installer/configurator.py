"""
Post-install configuration.

Registers the install with BinDiff's own ``bindiff_config_setup`` helper,
installs the per-user disassembler plugins, and checks that ``bindiff`` runs.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from setup_bindiff.core.filesystem import (
    WINDOWS_EXTENSIONS,
    ensure_directory,
    find_executable,
)
from setup_bindiff.core.interfaces import ProcessRunner
from setup_bindiff.core.platform import HostEnvironment, PlatformInfo
from setup_bindiff.installer.layout import (
    BINDIFF_EXE,
    CONFIG_SETUP_EXE,
    TOOL_NAME,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "bindiff.json"
IDA_EXECUTABLE = "ida"

# (name, search_path, extensions) -> executable path or None
ExecutableLookup = Callable[[str, Optional[str], Sequence[str]], Optional[Path]]


class Configurator:
    """Runs BinDiff's setup utilities against an installed tree."""

    def __init__(
        self,
        platform: PlatformInfo,
        host: HostEnvironment,
        runner: ProcessRunner,
        which: ExecutableLookup = find_executable,
    ):
        self.platform = platform
        self.host = host
        self.runner = runner
        self.which = which

    def config_path(self) -> Path:
        """
        Ensure the user configuration directory exists and return the config file path.

        Raises:
            MissingEnvironmentError: If APPDATA (Windows) or HOME is unset
        """
        config_dir = ensure_directory(self.platform.config_dir(self.host))
        return config_dir / CONFIG_FILE_NAME

    def find_ida_dir(self) -> Optional[Path]:
        """Get the directory of the ``ida`` executable on PATH, if any."""
        extensions = WINDOWS_EXTENSIONS if self.platform.is_windows else ("",)
        ida_path = self.which(
            IDA_EXECUTABLE, self.host.environ.get("PATH", ""), extensions
        )
        if not ida_path:
            return None
        return Path(ida_path).parent

    def setup_args(
        self, config_path: Path, install_path: Path, ida_dir: Optional[Path]
    ) -> List[str]:
        """Arguments recording the install (and IDA) directories in the config file."""
        args = ["--config", str(config_path), f"directory={install_path}"]
        if ida_dir:
            args.append(f"ida.directory={ida_dir}")
        return args

    def configure(self, install_path: Path) -> None:
        """
        Configure an installed BinDiff.

        Args:
            install_path: Root of the cached install (contains ``bin/``)

        Raises:
            MissingEnvironmentError: If the config directory variable is unset
            ProcessError: If any helper invocation fails
        """
        logger.info(f"Setting up {TOOL_NAME}")

        config_path = self.config_path()
        logger.debug(f"Config path: {config_path}")

        logger.info("Looking for IDA Pro installation")
        ida_dir = self.find_ida_dir()
        if not ida_dir:
            logger.info("IDA Pro not found in path")
        else:
            logger.info(f"Found IDA Pro at {ida_dir}")

        bin_dir = Path(install_path) / "bin"
        config_setup = bin_dir / self.platform.exe_name(CONFIG_SETUP_EXE)

        self.runner.run(config_setup, self.setup_args(config_path, install_path, ida_dir))

        # per-user disassembler plugin links
        self.runner.run(config_setup, ["--per_user"])

        self.runner.run(bin_dir / self.platform.exe_name(BINDIFF_EXE), ["--version"])

"""
Fixed layout of the BinDiff release archive.
"""

from dataclasses import dataclass
from typing import Tuple

TOOL_NAME = "BinDiff"

IDA_PRO = "IDA Pro"
BINARY_NINJA = "Binary Ninja"


@dataclass(frozen=True)
class ArchiveFile:
    """A file shipped in the archive: its source subdirectory and base name."""

    subdir: str
    name: str


@dataclass(frozen=True)
class ArchiveLayout:
    """Where each installed component lives inside the extracted archive."""

    executables: Tuple[ArchiveFile, ...]
    plugins: Tuple[Tuple[str, Tuple[ArchiveFile, ...]], ...]

    @staticmethod
    def root_name(label: str) -> str:
        """Top-level directory (and asset base name) for a platform label."""
        return f"{TOOL_NAME}-{label}"

    @property
    def executable_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.executables)


BINDIFF_EXE = "bindiff"
CONFIG_SETUP_EXE = "bindiff_config_setup"
BINEXPORT_DUMP_EXE = "binexport2dump"

LAYOUT = ArchiveLayout(
    executables=(
        ArchiveFile("", BINDIFF_EXE),
        ArchiveFile("tools", CONFIG_SETUP_EXE),
        ArchiveFile("tools", BINEXPORT_DUMP_EXE),
    ),
    plugins=(
        (
            IDA_PRO,
            (
                ArchiveFile("ida", "binexport12_ida"),
                ArchiveFile("ida", "bindiff8_ida"),
            ),
        ),
        (
            BINARY_NINJA,
            (ArchiveFile("binaryninja", "binexport12_binaryninja"),),
        ),
    ),
)

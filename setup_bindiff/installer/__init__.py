"""
BinDiff release retrieval, installation and configuration.
"""

from .configurator import Configurator
from .installer import Installer
from .layout import LAYOUT, TOOL_NAME, ArchiveLayout
from .release import (
    BASE_URL,
    FetchResult,
    ReleaseArchiveFetcher,
    ReleaseFetcher,
    asset_name,
    resolve_url,
)
from .workflow import SetupWorkflow, WorkflowResult

__all__ = [
    "Configurator",
    "Installer",
    "LAYOUT",
    "TOOL_NAME",
    "ArchiveLayout",
    "BASE_URL",
    "FetchResult",
    "ReleaseArchiveFetcher",
    "ReleaseFetcher",
    "asset_name",
    "resolve_url",
    "SetupWorkflow",
    "WorkflowResult",
]

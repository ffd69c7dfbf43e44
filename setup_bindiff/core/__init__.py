"""
Core functionality for setup-bindiff.

This package contains the platform, network, filesystem, cache and process
primitives the installer workflow is built from.
"""

from .platform import (
    HostEnvironment,
    PlatformInfo,
    normalize_arch,
    resolve_platform,
)

from .results import (
    StageResult,
    run_stage,
)

from .exceptions import (
    SetupBinDiffError,
    EnvironmentConfigError,
    UnsupportedPlatformError,
    UnsupportedArchitectureError,
    MissingEnvironmentError,
    FetchError,
    DownloadError,
    FilesystemError,
    ArchiveExtractionError,
    InsecureArchiveError,
    InstallError,
    CacheError,
    CacheLockTimeout,
    ProcessError,
    ConfigError,
)

__all__ = [
    "HostEnvironment",
    "PlatformInfo",
    "normalize_arch",
    "resolve_platform",
    "StageResult",
    "run_stage",
    "SetupBinDiffError",
    "EnvironmentConfigError",
    "UnsupportedPlatformError",
    "UnsupportedArchitectureError",
    "MissingEnvironmentError",
    "FetchError",
    "DownloadError",
    "FilesystemError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "InstallError",
    "CacheError",
    "CacheLockTimeout",
    "ProcessError",
    "ConfigError",
]

"""
Centralized exception hierarchy for setup-bindiff.

Every failure the installer can report derives from SetupBinDiffError so that
the workflow driver can turn it into a failed stage result without catching
unrelated programming errors.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class SetupBinDiffError(Exception):
    """Base exception for all setup-bindiff errors."""

    pass


# ============================================================================
# Environment Exceptions
# ============================================================================


class EnvironmentConfigError(SetupBinDiffError):
    """Base exception for problems with the host environment."""

    pass


class UnsupportedPlatformError(EnvironmentConfigError):
    """Raised when the host operating system has no release asset."""

    def __init__(self, system: str):
        self.system = system
        super().__init__(f"Unsupported platform: {system}")


class UnsupportedArchitectureError(EnvironmentConfigError):
    """Raised when the host CPU architecture has no release asset."""

    def __init__(self, arch: str):
        self.arch = arch
        super().__init__(f"Unsupported arch: {arch}")


class MissingEnvironmentError(EnvironmentConfigError):
    """Raised when a required environment variable is not set."""

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"Environment variable {variable} is not set")


# ============================================================================
# Fetch Exceptions
# ============================================================================


class FetchError(SetupBinDiffError):
    """Base exception for release retrieval errors."""

    pass


class DownloadError(FetchError):
    """Raised when a download fails after all retries."""

    pass


# ============================================================================
# Filesystem Exceptions
# ============================================================================


class FilesystemError(SetupBinDiffError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class InstallError(FilesystemError):
    """Raised when a release file cannot be moved into the install layout."""

    pass


# ============================================================================
# Cache Exceptions
# ============================================================================


class CacheError(SetupBinDiffError):
    """Base exception for tool cache errors."""

    pass


class CacheLockTimeout(CacheError):
    """Raised when the cache lock cannot be acquired within timeout."""

    pass


# ============================================================================
# Process and Configuration Exceptions
# ============================================================================


class ProcessError(SetupBinDiffError):
    """Raised when an external tool exits with a failure status."""

    def __init__(self, tool: str, returncode: int, message: str = ""):
        self.tool = tool
        self.returncode = returncode
        super().__init__(
            message or f"The process '{tool}' failed with exit code {returncode}"
        )


class ConfigError(SetupBinDiffError):
    """Raised when the action configuration cannot be loaded."""

    pass

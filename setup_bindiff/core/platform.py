"""
Platform resolution for setup-bindiff.

The host environment (OS name, CPU architecture, environment variables) is
captured once at startup into a HostEnvironment and passed explicitly to every
component. resolve_platform() turns it into a PlatformInfo carrying the release
asset label and all platform-specific naming rules.

Usage:
    from setup_bindiff.core.platform import HostEnvironment, resolve_platform

    host = HostEnvironment.current()
    platform_info = resolve_platform(host)
    print(platform_info.label)            # 'Linux'
    print(platform_info.exe_name("bindiff"))
"""

import os
import platform
import sys
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Mapping

import distro

from setup_bindiff.core.exceptions import (
    MissingEnvironmentError,
    UnsupportedArchitectureError,
    UnsupportedPlatformError,
)

SUPPORTED_ARCH = "x64"

# Host OS name -> (family, release asset label)
_PLATFORM_LABELS = {
    "linux": ("linux", "Linux"),
    "win32": ("windows", "Windows"),
    "windows": ("windows", "Windows"),
    "cygwin": ("windows", "Windows"),
}


@dataclass(frozen=True)
class HostEnvironment:
    """
    Snapshot of the execution environment.

    Attributes:
        system: OS name in sys.platform style ('linux', 'win32', 'darwin')
        machine: Raw CPU architecture ('x86_64', 'AMD64', 'aarch64')
        environ: Environment variables visible to the run
        distribution: Linux distribution id, empty elsewhere
    """

    system: str
    machine: str
    environ: Mapping[str, str] = field(default_factory=dict)
    distribution: str = ""

    @classmethod
    def current(cls) -> "HostEnvironment":
        """Capture the environment of the running process."""
        system = sys.platform
        return cls(
            system=system,
            machine=platform.machine(),
            environ=dict(os.environ),
            distribution=distro.id() if system == "linux" else "",
        )

    def require(self, variable: str) -> str:
        """
        Get a required environment variable.

        Raises:
            MissingEnvironmentError: If the variable is unset or empty
        """
        value = self.environ.get(variable)
        if not value:
            raise MissingEnvironmentError(variable)
        return value


@dataclass(frozen=True)
class PlatformInfo:
    """
    Resolved platform for release selection and install layout.

    Attributes:
        family: 'linux' or 'windows'
        label: Release asset label ('Linux', 'Windows')
        arch: Normalized CPU architecture ('x64')
        distribution: Linux distribution id, empty elsewhere
    """

    family: str
    label: str
    arch: str = SUPPORTED_ARCH
    distribution: str = ""

    @property
    def is_windows(self) -> bool:
        return self.family == "windows"

    @property
    def needs_chmod(self) -> bool:
        """Whether moved executables must be marked executable explicitly."""
        return not self.is_windows

    def exe_name(self, name: str) -> str:
        """
        Get the executable file name for this platform.

        Example:
            >>> PlatformInfo("windows", "Windows").exe_name("bindiff")
            'bindiff.exe'
        """
        return f"{name}.exe" if self.is_windows else name

    def library_name(self, name: str) -> str:
        """Get the shared library file name for this platform."""
        return f"{name}.dll" if self.is_windows else f"{name}.so"

    def plugin_dir_name(self, name: str) -> str:
        """
        Get the relative plugin directory for a host application.

        Windows keeps the name verbatim; elsewhere the whole relative path is
        lower-cased and stripped of spaces.

        Example:
            >>> PlatformInfo("linux", "Linux").plugin_dir_name("IDA Pro")
            'plugins/idapro'
        """
        relative = str(PurePosixPath("Plugins", name))
        if self.is_windows:
            return relative
        return relative.replace(" ", "").lower()

    def plugins_dir(self, base: Path, name: str) -> Path:
        """Get the plugin directory for a host application under ``base``."""
        return Path(base) / self.plugin_dir_name(name)

    def config_dir(self, host: HostEnvironment) -> Path:
        """
        Get the per-user BinDiff configuration directory.

        Raises:
            MissingEnvironmentError: If APPDATA (Windows) or HOME is unset
        """
        if self.is_windows:
            return Path(host.require("APPDATA")) / "BinDiff"
        return Path(host.require("HOME")) / ".bindiff"

    def __str__(self) -> str:
        parts = [f"{self.label}-{self.arch}"]
        if self.distribution:
            parts.append(f"({self.distribution})")
        return " ".join(parts)


def normalize_arch(machine: str) -> str:
    """
    Normalize a CPU architecture name.

    Returns:
        'x64', 'arm64', 'x86', 'arm', or the lower-cased input when unknown
    """
    machine = machine.lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    return machine


def resolve_platform(host: HostEnvironment) -> PlatformInfo:
    """
    Resolve the host to a supported platform.

    Performs no I/O.

    Args:
        host: Captured host environment

    Returns:
        PlatformInfo for the host

    Raises:
        UnsupportedPlatformError: If the OS has no release asset
        UnsupportedArchitectureError: If the architecture is not x64
    """
    try:
        family, label = _PLATFORM_LABELS[host.system.lower()]
    except KeyError:
        raise UnsupportedPlatformError(host.system) from None

    arch = normalize_arch(host.machine)
    if arch != SUPPORTED_ARCH:
        raise UnsupportedArchitectureError(host.machine)

    return PlatformInfo(
        family=family, label=label, arch=arch, distribution=host.distribution
    )


__all__ = [
    "SUPPORTED_ARCH",
    "HostEnvironment",
    "PlatformInfo",
    "normalize_arch",
    "resolve_platform",
]

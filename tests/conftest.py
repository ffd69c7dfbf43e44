"""
Pytest configuration and shared fixtures for setup-bindiff tests.
"""

import pytest
from pathlib import Path

from setup_bindiff.core.platform import HostEnvironment, PlatformInfo
from tests.mocks import CallLog, RecordingArchives, RecordingCache, RecordingRunner


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Platform Fixtures
# ============================================================================


@pytest.fixture
def linux_platform() -> PlatformInfo:
    """Resolved Linux x64 platform."""
    return PlatformInfo(family="linux", label="Linux", arch="x64")


@pytest.fixture
def windows_platform() -> PlatformInfo:
    """Resolved Windows x64 platform."""
    return PlatformInfo(family="windows", label="Windows", arch="x64")


@pytest.fixture
def runner_dirs(tmp_path: Path) -> dict:
    """Scratch, home and app-data directories of a simulated runner."""
    dirs = {
        "RUNNER_TEMP": tmp_path / "runner_temp",
        "HOME": tmp_path / "home",
        "APPDATA": tmp_path / "appdata",
    }
    for path in dirs.values():
        path.mkdir()
    return dirs


@pytest.fixture
def linux_host(runner_dirs) -> HostEnvironment:
    """Linux x64 host with RUNNER_TEMP and HOME set and an empty PATH."""
    return HostEnvironment(
        system="linux",
        machine="x86_64",
        environ={
            "RUNNER_TEMP": str(runner_dirs["RUNNER_TEMP"]),
            "HOME": str(runner_dirs["HOME"]),
            "PATH": "",
        },
        distribution="ubuntu",
    )


@pytest.fixture
def windows_host(runner_dirs) -> HostEnvironment:
    """Windows x64 host with RUNNER_TEMP and APPDATA set and an empty PATH."""
    return HostEnvironment(
        system="win32",
        machine="AMD64",
        environ={
            "RUNNER_TEMP": str(runner_dirs["RUNNER_TEMP"]),
            "APPDATA": str(runner_dirs["APPDATA"]),
            "PATH": "",
        },
    )


# ============================================================================
# Collaborator Doubles
# ============================================================================


@pytest.fixture
def call_log() -> CallLog:
    """Call log shared by the recording doubles."""
    return CallLog()


@pytest.fixture
def recording_cache(tmp_path: Path, call_log: CallLog) -> RecordingCache:
    return RecordingCache(tmp_path / "toolcache", call_log)


@pytest.fixture
def recording_archives(tmp_path: Path, linux_platform, call_log) -> RecordingArchives:
    return RecordingArchives(tmp_path / "scratch", linux_platform, call_log)


@pytest.fixture
def recording_runner(call_log: CallLog) -> RecordingRunner:
    return RecordingRunner(call_log)

"""
End-to-end installer workflow.

Runs the stages in a fixed order and stops at the first failure:

1. resolve-platform  host OS/arch -> PlatformInfo (no I/O)
2. fetch             tool cache lookup, else download + extract
3. install           assemble install tree and cache it (skipped on cache hit)
4. add-path          publish ``<install>/bin`` on PATH
5. configure         bindiff_config_setup, per-user plugins, version check
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, MutableMapping, Optional

from setup_bindiff.core.actions import add_path
from setup_bindiff.core.filesystem import find_executable
from setup_bindiff.core.interfaces import ArchiveFetcher, CacheStore, ProcessRunner
from setup_bindiff.core.platform import HostEnvironment, resolve_platform
from setup_bindiff.core.process import SubprocessRunner
from setup_bindiff.core.results import StageResult, run_stage
from setup_bindiff.core.tool_cache import ToolCache, default_cache_root
from setup_bindiff.installer.configurator import Configurator, ExecutableLookup
from setup_bindiff.installer.installer import Installer
from setup_bindiff.installer.layout import TOOL_NAME
from setup_bindiff.installer.release import (
    LATEST,
    ReleaseArchiveFetcher,
    ReleaseFetcher,
)

logger = logging.getLogger(__name__)


@dataclass
class WorkflowResult:
    """Outcome of a full installer run."""

    stages: List[StageResult] = field(default_factory=list)
    install_path: Optional[Path] = None

    @property
    def failure(self) -> Optional[StageResult]:
        """The failed stage, if any."""
        for stage in self.stages:
            if not stage.ok:
                return stage
        return None

    @property
    def ok(self) -> bool:
        return self.failure is None


class SetupWorkflow:
    """
    Installs and configures BinDiff for a CI job.

    Collaborators default to the real implementations; pass doubles to run
    the workflow without network, cache or subprocess access.

    Example:
        >>> workflow = SetupWorkflow(HostEnvironment.current(), version="latest")
        >>> result = workflow.run()
        >>> result.install_path
        PosixPath('/opt/hostedtoolcache/BinDiff/latest/x64')
    """

    def __init__(
        self,
        host: HostEnvironment,
        version: str = LATEST,
        cache: Optional[CacheStore] = None,
        archives: Optional[ArchiveFetcher] = None,
        runner: Optional[ProcessRunner] = None,
        which: ExecutableLookup = find_executable,
        path_environ: Optional[MutableMapping[str, str]] = None,
    ):
        self.host = host
        self.version = version or LATEST
        self.cache = cache or ToolCache(default_cache_root(host.environ))
        self.archives = archives or ReleaseArchiveFetcher(host)
        self.runner = runner or SubprocessRunner()
        self.which = which
        self.path_environ = os.environ if path_environ is None else path_environ

    def run(self) -> WorkflowResult:
        """Run all stages, stopping at the first failure."""
        result = WorkflowResult()

        logger.debug(f"Version: {self.version}")

        resolved = self._record(
            result, run_stage("resolve-platform", resolve_platform, self.host)
        )
        if not resolved.ok:
            return result
        platform = resolved.value
        logger.debug(f"Platform: {platform}")

        fetcher = ReleaseFetcher(platform, self.cache, self.archives)
        fetched = self._record(
            result,
            run_stage("fetch", fetcher.fetch_or_reuse, TOOL_NAME, self.version),
        )
        if not fetched.ok:
            return result

        if fetched.value.was_cached:
            install_path = fetched.value.path
        else:
            installer = Installer(platform, self.host, self.cache)
            installed = self._record(
                result,
                run_stage("install", installer.install, fetched.value.path, self.version),
            )
            if not installed.ok:
                return result
            install_path = installed.value

        published = self._record(
            result,
            run_stage("add-path", add_path, install_path / "bin", self.path_environ),
        )
        if not published.ok:
            return result
        result.install_path = install_path

        configurator = Configurator(platform, self.host, self.runner, self.which)
        self._record(result, run_stage("configure", configurator.configure, install_path))

        return result

    def _record(self, result: WorkflowResult, stage: StageResult) -> StageResult:
        result.stages.append(stage)
        if not stage.ok:
            logger.debug(f"Stopping after failed stage '{stage.stage}'")
        return stage

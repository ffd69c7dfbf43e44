"""
External process execution.

Commands run to completion with their output streamed straight to the job
log. A non-zero exit status is fatal and surfaces as ProcessError.
"""

import logging
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

from setup_bindiff.core.exceptions import ProcessError
from setup_bindiff.core.interfaces import ProcessRunner

logger = logging.getLogger(__name__)


class SubprocessRunner(ProcessRunner):
    """Runs tools with ``subprocess.run``."""

    def __init__(self, env: Optional[Mapping[str, str]] = None):
        """
        Args:
            env: Environment for child processes (default: inherit)
        """
        self.env = dict(env) if env is not None else None

    def run(self, tool: Path, args: Sequence[str]) -> int:
        command = [str(tool), *[str(arg) for arg in args]]
        logger.info(f"[command]{' '.join(command)}")

        try:
            result = subprocess.run(command, env=self.env, check=False)
        except OSError as e:
            raise ProcessError(
                str(tool), -1, f"Unable to start '{tool}': {e}"
            ) from e

        if result.returncode != 0:
            raise ProcessError(str(tool), result.returncode)

        return result.returncode

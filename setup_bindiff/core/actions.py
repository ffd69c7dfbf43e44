"""
CI runner integration.

Reads action inputs from ``INPUT_*`` variables and talks back to the runner
through workflow commands and the ``GITHUB_PATH`` file.
"""

import logging
import os
import sys
from pathlib import Path
from typing import MutableMapping, Optional, TextIO

logger = logging.getLogger(__name__)


def get_input(name: str, environ: Optional[MutableMapping[str, str]] = None) -> str:
    """
    Get an action input.

    Example:
        >>> get_input("version", {"INPUT_VERSION": " v8 "})
        'v8'
    """
    environ = os.environ if environ is None else environ
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    return environ.get(key, "").strip()


def is_debug(environ: Optional[MutableMapping[str, str]] = None) -> bool:
    """Whether the runner has step debug logging enabled."""
    environ = os.environ if environ is None else environ
    return environ.get("RUNNER_DEBUG") == "1"


def add_path(directory: Path, environ: Optional[MutableMapping[str, str]] = None) -> None:
    """
    Prepend a directory to PATH for this process and for later job steps.

    Later steps only see the directory when the runner provides GITHUB_PATH.
    """
    environ = os.environ if environ is None else environ
    directory = str(directory)

    path_file = environ.get("GITHUB_PATH")
    if path_file:
        with open(path_file, "a", encoding="utf-8") as f:
            f.write(f"{directory}\n")
    else:
        logger.warning(
            f"GITHUB_PATH not set, {directory} is only added for this process"
        )

    current = environ.get("PATH", "")
    environ["PATH"] = f"{directory}{os.pathsep}{current}" if current else directory
    logger.debug(f"Added to PATH: {directory}")


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_failed(message: str, stream: Optional[TextIO] = None) -> int:
    """
    Report the run as failed.

    Returns:
        Exit code to terminate with
    """
    stream = stream or sys.stdout
    stream.write(f"::error::{_escape_data(message)}\n")
    stream.flush()
    return 1

"""
Configuration loading for the CLI.

Settings come from, in increasing precedence: built-in defaults, an optional
YAML file, the action inputs (``INPUT_*``), and command-line flags.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from setup_bindiff.core.actions import get_input, is_debug
from setup_bindiff.core.exceptions import ConfigError
from setup_bindiff.installer.release import LATEST

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "setup-bindiff.yaml"


@dataclass
class ActionConfig:
    """Resolved settings for one installer run."""

    version: str = LATEST
    tool_cache_dir: Optional[Path] = None
    verbose: bool = False


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigError: If the file is required and missing, or is not a YAML mapping

    Example:
        >>> config = load_yaml_config(Path("setup-bindiff.yaml"))
        >>> config.get("version", "latest")
    """
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration in {config_file} must be a mapping")

    return config


def load_action_config(
    environ: Mapping[str, str],
    config_file: Optional[Path] = None,
    version: Optional[str] = None,
    tool_cache_dir: Optional[Path] = None,
    verbose: bool = False,
) -> ActionConfig:
    """
    Resolve the run settings.

    Args:
        environ: Environment holding the action inputs
        config_file: Explicit YAML file (must exist); defaults to
            ./setup-bindiff.yaml when present
        version: Version from the command line
        tool_cache_dir: Tool cache root from the command line
        verbose: Debug logging requested on the command line

    Returns:
        ActionConfig with every source applied
    """
    if config_file is not None:
        file_config = load_yaml_config(Path(config_file), required=True)
    else:
        file_config = load_yaml_config(Path.cwd() / DEFAULT_CONFIG_FILE)

    config = ActionConfig()

    if file_config.get("version"):
        config.version = str(file_config["version"])
    if file_config.get("tool_cache"):
        config.tool_cache_dir = Path(file_config["tool_cache"])
    config.verbose = bool(file_config.get("verbose", False))

    environ = dict(environ)
    input_version = get_input("version", environ)
    if input_version:
        config.version = input_version
    if is_debug(environ):
        config.verbose = True

    if version:
        config.version = version
    if tool_cache_dir:
        config.tool_cache_dir = Path(tool_cache_dir)
    if verbose:
        config.verbose = True

    logger.debug(f"Resolved configuration: {config}")
    return config

"""
setup-bindiff command-line interface.

Runs the installer workflow and reports a failure the way the CI runner
expects: an ``::error::`` workflow command and a non-zero exit code.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from setup_bindiff.core.actions import is_debug, set_failed
from setup_bindiff.core.platform import HostEnvironment
from setup_bindiff.core.tool_cache import ToolCache
from setup_bindiff.installer.layout import TOOL_NAME
from setup_bindiff.installer.workflow import SetupWorkflow

try:
    from importlib.metadata import version

    __version__ = version("setup-bindiff")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """setup-bindiff command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="setup-bindiff",
            description="Install and configure BinDiff on a CI runner",
            epilog="The BinDiff version may also be given as the INPUT_VERSION action input",
        )

        parser.add_argument(
            "--version", action="version", version=f"setup-bindiff {__version__}"
        )
        parser.add_argument(
            "--bindiff-version",
            metavar="TAG",
            help='BinDiff release tag to install (default: "latest")',
        )
        parser.add_argument(
            "--tool-cache",
            type=Path,
            metavar="PATH",
            help="Tool cache root (default: $RUNNER_TOOL_CACHE)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./setup-bindiff.yaml)",
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None):
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        try:
            return self._install(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except Exception as e:
            logger.debug("Unhandled error", exc_info=True)
            return set_failed(str(e))

    def _install(self, args) -> int:
        from setup_bindiff.cli.utils import load_action_config

        host = HostEnvironment.current()
        config = load_action_config(
            host.environ,
            config_file=args.config,
            version=args.bindiff_version,
            tool_cache_dir=args.tool_cache,
            verbose=args.verbose,
        )

        if config.verbose and not args.verbose:
            self._configure_logging(args, verbose=True)

        cache = ToolCache(config.tool_cache_dir) if config.tool_cache_dir else None
        workflow = SetupWorkflow(host, version=config.version, cache=cache)
        result = workflow.run()

        failure = result.failure
        if failure is not None:
            logger.debug(f"Stage '{failure.stage}' failed")
            return set_failed(str(failure.error))

        logger.info(f"Successfully installed {TOOL_NAME}")
        return 0

    def _configure_logging(self, args, verbose: bool = False):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
            verbose: Force debug output (e.g. from the configuration file)
        """
        if verbose or args.verbose or is_debug(os.environ):
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stdout,
            force=True,
        )


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()

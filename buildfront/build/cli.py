"""Command-line interface for buildfront.

Usage::

    buildfront [default|release|clean] [VERBOSE=1] [FLAGS="..."] [options]
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from buildfront.__version__ import __version__
from buildfront.build.builder import Builder
from buildfront.build.config import BuildConfig, Operation
from buildfront.build.utils import exit_status, format_command, parse_assignments
from buildfront.core.config_manager import LOG_LEVEL_NAMES, ConfigManager
from buildfront.core.logging_manager import LoggingManager
from buildfront.utils.exceptions import BuildfrontError


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the command-line interface."""
    parser = argparse.ArgumentParser(
        prog="buildfront",
        description="Run the build tool for a named operation",
        epilog="Environment: VERBOSE=1 adds --verbose, FLAGS adds extra "
               "arguments, BUILD_TOOL picks the executable.",
    )
    parser.add_argument(
        "targets",
        nargs="*",
        metavar="OPERATION | NAME=VALUE",
        help=f"Operation ({', '.join(op.value for op in Operation)}; "
             f"default: {Operation.DEFAULT.value}) and variable overrides",
    )
    parser.add_argument("--tool", help="Build tool executable (overrides BUILD_TOOL)")
    parser.add_argument(
        "-n", "--dry-run",
        action="store_true",
        help="Print the command that would run and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVEL_NAMES,
        help="Log level for buildfront's own messages (written to stderr)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the command-line interface.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        The build tool's exit status, or a reserved code for buildfront errors
    """
    parser = create_parser()
    parsed = parser.parse_args(args)
    env = os.environ

    logging_manager = None
    try:
        operations, overrides = parse_assignments(parsed.targets)
        if len(operations) > 1:
            parser.error(f"expected at most one operation, got: {' '.join(operations)}")
        operation = Operation.parse(operations[0] if operations else None)
        if parsed.tool:
            overrides["BUILD_TOOL"] = parsed.tool

        config_manager = ConfigManager(env)
        config_manager.initialize()
        logging_manager = LoggingManager(config_manager, level=parsed.log_level)
        logging_manager.initialize()

        config = BuildConfig.from_env(env, overrides=overrides)
        builder = Builder(config, env=env, logger=logging_manager.get_logger("buildfront.build"))

        if parsed.dry_run:
            print(format_command([config.tool] + builder.compose(operation)))
            return 0

        return exit_status(builder.run(operation))

    except BuildfrontError as e:
        print(f"buildfront: error: {e}", file=sys.stderr)
        return e.exit_code

    finally:
        if logging_manager is not None:
            logging_manager.shutdown()


if __name__ == "__main__":
    sys.exit(main())

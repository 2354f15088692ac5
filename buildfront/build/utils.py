"""Utility functions for the buildfront build system.

Helpers for parsing command-line variable assignments, locating the build
tool executable and turning subprocess return codes into exit statuses.
"""

from __future__ import annotations

import os
import shlex
import shutil
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from buildfront.build.config import ENV_VARS
from buildfront.utils.exceptions import (
    EX_NOT_EXECUTABLE,
    ConfigurationError,
    LaunchFailureError,
)


def parse_assignments(tokens: Sequence[str]) -> Tuple[List[str], Dict[str, str]]:
    """Separate ``NAME=VALUE`` assignments from operation names.

    Assignments work like make's command-line variables and override the
    environment.

    Args:
        tokens: Positional command-line arguments

    Returns:
        Tuple of (operation names in order, assignments by variable name)

    Raises:
        ConfigurationError: If an assignment names an unknown variable
    """
    known = set(ENV_VARS.values())
    names: List[str] = []
    assignments: Dict[str, str] = {}

    for token in tokens:
        if "=" not in token:
            names.append(token)
            continue

        name, value = token.split("=", 1)
        if name not in known:
            raise ConfigurationError(
                f"Unknown variable '{name}' (expected one of {', '.join(sorted(known))})",
                config_key=name
            )
        assignments[name] = value

    return names, assignments


def find_executable(tool: str, env: Optional[Mapping[str, str]] = None) -> str:
    """Locate the build tool executable.

    Args:
        tool: Executable name, or a path to it
        env: Environment whose PATH is searched; the process PATH when omitted

    Returns:
        Path to the executable

    Raises:
        LaunchFailureError: If the executable is missing or not executable
    """
    search_path = env.get("PATH") if env is not None else None
    found = shutil.which(tool, path=search_path)
    if found:
        return found

    if os.path.dirname(tool) and os.path.exists(tool):
        raise LaunchFailureError(tool, reason="permission denied", exit_code=EX_NOT_EXECUTABLE)

    raise LaunchFailureError(tool, reason="command not found")


def format_command(argv: Sequence[str]) -> str:
    """Render an argument vector as a shell-quoted command line.

    Args:
        argv: Executable followed by its arguments

    Returns:
        Command line string suitable for copy and paste into a shell
    """
    return shlex.join(argv)


def exit_status(returncode: int) -> int:
    """Convert a subprocess return code to a process exit status.

    Non-negative codes pass through unchanged. A child killed by signal N
    reports ``-N``; shells report that as ``128 + N``.

    Args:
        returncode: Return code from the subprocess

    Returns:
        Exit status to hand to ``sys.exit``
    """
    if returncode < 0:
        return 128 - returncode
    return returncode

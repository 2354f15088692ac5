"""Builder for dispatching operations to the external build tool.

This module contains the Builder class that resolves an operation, composes
the tool's argument list from a BuildConfig and runs the tool as a single
subprocess whose exit status is handed back unchanged.
"""

from __future__ import annotations

import contextlib
import logging
import os
import signal
import subprocess
import threading
from typing import Any, Iterator, List, Mapping, Optional, Union

from buildfront.build.config import BuildConfig, Operation
from buildfront.build.utils import find_executable, format_command
from buildfront.utils.exceptions import (
    EX_NOT_EXECUTABLE,
    LaunchFailureError,
    ToolFailureError,
)

# Signals relayed to the build tool while it runs. SIGINT is not in the list:
# the terminal already delivers it to the whole foreground process group.
FORWARDED_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


@contextlib.contextmanager
def forward_signals(process: subprocess.Popen) -> Iterator[None]:
    """Relay termination signals to ``process`` for the duration of the block.

    Handlers can only be installed from the main thread; elsewhere this is a
    no-op. Previous handlers are restored on exit.

    Args:
        process: The running child process
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def relay(signum: int, frame: Any) -> None:
        process.send_signal(signum)

    previous = {}
    try:
        for signum in FORWARDED_SIGNALS:
            previous[signum] = signal.signal(signum, relay)
        previous[signal.SIGINT] = signal.signal(signal.SIGINT, signal.SIG_IGN)
        yield
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)


def compose_args(
        operation: Union[str, Operation, None], config: BuildConfig
) -> List[str]:
    """Compose the build tool argument list for an operation.

    Args:
        operation: Operation name; ``None`` selects the default build
        config: Build configuration

    Returns:
        Argument list, without the executable itself

    Raises:
        UnknownOperationError: If the operation is not recognized
    """
    return config.to_tool_args(operation)


class Builder:
    """Runs the external build tool for one operation.

    Attributes:
        config: Build configuration
        env: Variables layered over the inherited environment for the child
        logger: Logger for dispatch progress
    """

    def __init__(
            self,
            config: BuildConfig,
            env: Optional[Mapping[str, str]] = None,
            logger: Optional[Any] = None
    ) -> None:
        """Initialize the Builder with the given configuration.

        Args:
            config: Build configuration
            env: Variables added to the inherited process environment, also
                used for locating the tool
            logger: Optional logger, defaults to this module's logger
        """
        self.config = config
        self.env = env
        self.logger = logger or logging.getLogger(__name__)

    def log(self, message: str, level: str = "info") -> None:
        """Log a message with the specified level.

        Args:
            message: Message to log
            level: Log level (info, warning, error, debug)
        """
        getattr(self.logger, level)(message)

    def compose(self, operation: Union[str, Operation, None] = None) -> List[str]:
        """Compose the argument list for ``operation`` from this builder's config."""
        return compose_args(operation, self.config)

    def run_tool(self, executable: str, args: List[str]) -> int:
        """Run the build tool and wait for it to finish.

        Standard streams are inherited, so the tool's output reaches the
        caller untouched.

        Args:
            executable: Path to the build tool
            args: Arguments for the build tool

        Returns:
            Return code from the build tool process

        Raises:
            LaunchFailureError: If the process cannot be started
        """
        cmd = [executable] + args
        env = {**os.environ, **self.env} if self.env is not None else None

        self.log(f"Running: {format_command(cmd)}", "debug")

        try:
            process = subprocess.Popen(cmd, env=env)
        except FileNotFoundError as e:
            raise LaunchFailureError(self.config.tool, reason="command not found") from e
        except PermissionError as e:
            raise LaunchFailureError(
                self.config.tool, reason="permission denied", exit_code=EX_NOT_EXECUTABLE
            ) from e
        except OSError as e:
            raise LaunchFailureError(
                self.config.tool, reason=e.strerror or str(e), exit_code=EX_NOT_EXECUTABLE
            ) from e

        with forward_signals(process):
            process.wait()

        return process.returncode

    def run(
            self, operation: Union[str, Operation, None] = None, check: bool = False
    ) -> int:
        """Run the build tool for an operation.

        This is the main entry point for dispatching.

        Args:
            operation: Operation name; ``None`` selects the default build
            check: Raise ToolFailureError instead of returning a non-zero status

        Returns:
            The build tool's return code, unchanged

        Raises:
            UnknownOperationError: If the operation is not recognized
            LaunchFailureError: If the build tool cannot be found or started
            ToolFailureError: If ``check`` is set and the tool failed
        """
        operation = Operation.parse(operation)
        args = self.compose(operation)
        executable = find_executable(self.config.tool, self.env)

        self.log(f"Operation '{operation.value}' using {executable}", "debug")
        returncode = self.run_tool(executable, args)
        self.log(f"{self.config.tool} exited with status {returncode}")

        if check and returncode != 0:
            raise ToolFailureError(self.config.tool, returncode)

        return returncode


def run(
        operation: Union[str, Operation, None],
        env: Mapping[str, str],
        logger: Optional[Any] = None
) -> int:
    """Run the build tool for ``operation`` configured from ``env``.

    Args:
        operation: Operation name; ``None`` selects the default build
        env: Environment mapping, read once for the whole invocation. The
            tool inherits the process environment with these values on top
        logger: Optional logger for dispatch progress

    Returns:
        The build tool's return code, unchanged
    """
    operation = Operation.parse(operation)
    config = BuildConfig.from_env(env)
    return Builder(config, env=env, logger=logger).run(operation)

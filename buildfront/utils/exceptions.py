from __future__ import annotations

from typing import Any, Optional

# Reserved exit codes for errors raised by buildfront itself. They follow the
# sysexits.h and POSIX shell conventions so they stay apart from the codes a
# build tool normally returns.
EX_USAGE = 64
EX_CONFIG = 78
EX_NOT_EXECUTABLE = 126
EX_NOT_FOUND = 127


class BuildfrontError(Exception):
    """Base exception for all buildfront errors."""

    exit_code: int = 1

    def __init__(self, message: str, **kwargs: Any) -> None:
        """
        Initialize exception.

        Args:
            message: Error message
            **kwargs: Additional error information
        """
        self.message = message
        details = dict(kwargs.pop("details", None) or {})
        details.update(kwargs)
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return f"{self.message}"


class ManagerError(BuildfrontError):
    """Base exception for manager-related errors."""

    def __init__(self, message: str, manager_name: Optional[str] = None, **kwargs: Any) -> None:
        """
        Initialize manager error.

        Args:
            message: Error message
            manager_name: Name of the affected manager
            **kwargs: Additional error information
        """
        if manager_name:
            kwargs["manager_name"] = manager_name
        super().__init__(message, **kwargs)
        self.manager_name = manager_name

    def __str__(self) -> str:
        """String representation."""
        if self.manager_name:
            return f"{self.message} (Manager: {self.manager_name})"
        return super().__str__()


class ManagerInitializationError(ManagerError):
    """Exception raised when a manager fails to initialize."""

    exit_code = EX_CONFIG


class ManagerShutdownError(ManagerError):
    """Exception raised when a manager fails to shut down cleanly."""

    pass


class ConfigurationError(BuildfrontError):
    """Exception raised for configuration-related errors."""

    exit_code = EX_CONFIG

    def __init__(
            self, message: str, config_key: Optional[str] = None, **kwargs: Any
    ) -> None:
        """Initialize a ConfigurationError.

        Args:
            message: A descriptive error message.
            config_key: The configuration key that caused the error.
            **kwargs: Additional error information.
        """
        details = dict(kwargs.pop("details", None) or {})
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details=details, **kwargs)
        self.config_key = config_key


class BuildError(BuildfrontError):
    """Base exception for errors while dispatching to the build tool."""

    pass


class UnknownOperationError(BuildError):
    """Exception raised when the requested operation is not recognized."""

    exit_code = EX_USAGE

    def __init__(self, operation: str, choices: Optional[list] = None, **kwargs: Any) -> None:
        """Initialize an UnknownOperationError.

        Args:
            operation: The operation name that was requested.
            choices: The operation names that would have been accepted.
            **kwargs: Additional error information.
        """
        message = f"unknown operation '{operation}'"
        if choices:
            message += f" (choose from {', '.join(choices)})"
        super().__init__(message, operation=operation, **kwargs)
        self.operation = operation


class LaunchFailureError(BuildError):
    """Exception raised when the build tool cannot be located or started."""

    def __init__(
            self,
            tool: str,
            reason: str = "not found",
            exit_code: int = EX_NOT_FOUND,
            **kwargs: Any
    ) -> None:
        """Initialize a LaunchFailureError.

        Args:
            tool: Name or path of the executable that failed to start.
            reason: Short description of the failure.
            exit_code: Reserved exit code to report for this failure.
            **kwargs: Additional error information.
        """
        super().__init__(f"cannot run '{tool}': {reason}", tool=tool, **kwargs)
        self.tool = tool
        self.exit_code = exit_code


class ToolFailureError(BuildError):
    """Exception raised when the build tool exits with a non-zero status.

    Only raised for checked runs; the command line propagates the status
    instead.
    """

    def __init__(self, tool: str, returncode: int, **kwargs: Any) -> None:
        """Initialize a ToolFailureError.

        Args:
            tool: The executable that ran.
            returncode: The status it returned.
            **kwargs: Additional error information.
        """
        super().__init__(
            f"'{tool}' exited with status {returncode}",
            tool=tool,
            returncode=returncode,
            **kwargs
        )
        self.tool = tool
        self.returncode = returncode
        self.exit_code = returncode if returncode >= 0 else 128 - returncode

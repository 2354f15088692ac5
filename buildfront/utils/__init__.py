"""Utility functions and classes for buildfront."""

from buildfront.utils.exceptions import (
    BuildError,
    BuildfrontError,
    ConfigurationError,
    LaunchFailureError,
    ManagerError,
    ManagerInitializationError,
    ManagerShutdownError,
    ToolFailureError,
    UnknownOperationError,
)

"""Unit tests for the exceptions module."""

import pytest

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


def test_buildfront_error():
    """Test the base BuildfrontError class."""
    error = BuildfrontError("Test error message")
    assert str(error) == "Test error message"
    assert error.details == {}
    assert error.exit_code == 1

    details = {"key": "value", "number": 123}
    error = BuildfrontError("Test with details", details=details, extra=True)
    assert error.details == {"key": "value", "number": 123, "extra": True}


def test_manager_error():
    """Test the ManagerError class."""
    error = ManagerError("Manager error message")
    assert str(error) == "Manager error message"
    assert "manager_name" not in error.details

    error = ManagerError("Manager error with name", manager_name="TestManager")
    assert str(error) == "Manager error with name (Manager: TestManager)"
    assert error.details["manager_name"] == "TestManager"


def test_manager_lifecycle_errors():
    """Test the initialization and shutdown error classes."""
    init_error = ManagerInitializationError("Init error", manager_name="config_manager")
    assert init_error.exit_code == 78
    assert init_error.details["manager_name"] == "config_manager"

    shutdown_error = ManagerShutdownError("Shutdown error", manager_name="logging_manager")
    assert isinstance(shutdown_error, ManagerError)
    assert shutdown_error.exit_code == 1


def test_configuration_error():
    """Test the ConfigurationError class."""
    error = ConfigurationError("Config error message")
    assert str(error) == "Config error message"
    assert "config_key" not in error.details
    assert error.exit_code == 78

    error = ConfigurationError(
        "Config error with key", config_key="FLAGS", details={"hint": "quote it"}
    )
    assert error.config_key == "FLAGS"
    assert error.details == {"config_key": "FLAGS", "hint": "quote it"}


def test_unknown_operation_error():
    """Test the UnknownOperationError class."""
    error = UnknownOperationError("bogus", choices=["default", "release", "clean"])
    assert isinstance(error, BuildError)
    assert str(error) == "unknown operation 'bogus' (choose from default, release, clean)"
    assert error.operation == "bogus"
    assert error.exit_code == 64


def test_launch_failure_error():
    """Test the LaunchFailureError class."""
    error = LaunchFailureError("cargo")
    assert str(error) == "cannot run 'cargo': not found"
    assert error.tool == "cargo"
    assert error.exit_code == 127

    error = LaunchFailureError("./cargo", reason="permission denied", exit_code=126)
    assert error.exit_code == 126
    assert error.details["tool"] == "./cargo"


@pytest.mark.parametrize("returncode, exit_code", [(1, 1), (101, 101), (-9, 137)])
def test_tool_failure_error(returncode, exit_code):
    """Test the ToolFailureError class."""
    error = ToolFailureError("cargo", returncode)
    assert error.returncode == returncode
    assert error.exit_code == exit_code
    assert str(error) == f"'cargo' exited with status {returncode}"

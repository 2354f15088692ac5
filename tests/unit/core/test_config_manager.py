"""Unit tests for the Configuration Manager."""

from __future__ import annotations

import pytest

from buildfront.core.config_manager import ConfigManager, ConfigSchema
from buildfront.utils.exceptions import ConfigurationError, ManagerInitializationError


def test_config_schema_default_values() -> None:
    """Test that ConfigSchema provides correct default values."""
    schema = ConfigSchema()

    assert schema.logging["level"] == "WARNING"
    assert schema.logging["format"] == "text"
    assert schema.logging["console"]["enabled"] is True
    assert schema.logging["file"]["enabled"] is False


def test_config_schema_rejects_unknown_level() -> None:
    """Test validation of the log level name."""
    with pytest.raises(ValueError, match="Unknown log level"):
        ConfigSchema(logging={"level": "loud", "format": "text"})


def test_config_schema_rejects_unknown_format() -> None:
    """Test validation of the log format name."""
    with pytest.raises(ValueError, match="Unknown log format"):
        ConfigSchema(logging={"level": "info", "format": "xml"})


def test_config_manager_defaults() -> None:
    """Test that an empty environment yields the schema defaults."""
    manager = ConfigManager(env={})
    manager.initialize()

    assert manager.initialized
    assert manager.healthy
    assert manager.get("logging.level") == "WARNING"
    assert manager.get("logging.file.enabled") is False


def test_config_manager_env_overrides() -> None:
    """Test that prefixed environment variables override defaults."""
    env = {
        "BUILDFRONT_LOGGING_LEVEL": "debug",
        "BUILDFRONT_LOGGING_FORMAT": "json",
        "BUILDFRONT_LOGGING_FILE_ENABLED": "yes",
        "VERBOSE": "1",
    }
    manager = ConfigManager(env=env)
    manager.initialize()

    assert manager.get("logging.level") == "debug"
    assert manager.get("logging.format") == "json"
    assert manager.get("logging.file.enabled") is True
    assert manager.status()["env_vars_applied"] == [
        "BUILDFRONT_LOGGING_FILE_ENABLED",
        "BUILDFRONT_LOGGING_FORMAT",
        "BUILDFRONT_LOGGING_LEVEL",
    ]


def test_config_manager_custom_prefix() -> None:
    """Test that only variables with the configured prefix apply."""
    env = {"BUILDFRONT_LOGGING_LEVEL": "debug", "BF_LOGGING_LEVEL": "error"}
    manager = ConfigManager(env=env, env_prefix="BF_")
    manager.initialize()

    assert manager.get("logging.level") == "error"


def test_config_manager_invalid_env() -> None:
    """Test that invalid values fail initialization."""
    manager = ConfigManager(env={"BUILDFRONT_LOGGING_FORMAT": "xml"})

    with pytest.raises(ManagerInitializationError) as exc_info:
        manager.initialize()

    assert "Unknown log format" in str(exc_info.value)
    assert exc_info.value.manager_name == "config_manager"
    assert not manager.initialized


def test_config_manager_get_before_initialize() -> None:
    """Test that reading before initialization is an error."""
    manager = ConfigManager(env={})

    with pytest.raises(ConfigurationError) as exc_info:
        manager.get("logging.level")

    assert exc_info.value.config_key == "logging.level"


def test_config_manager_get_default_and_copy() -> None:
    """Test missing keys and that returned values are copies."""
    manager = ConfigManager(env={})
    manager.initialize()

    assert manager.get("logging.nope", "fallback") == "fallback"
    assert manager.get("logging.level.deeper") is None

    logging_config = manager.get("logging")
    logging_config["level"] = "critical"
    assert manager.get("logging.level") == "WARNING"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("true", True),
        ("off", False),
        ("42", 42),
        ("-3", -3),
        ("1.5", 1.5),
        ("debug", "debug"),
    ],
)
def test_parse_env_value(value, expected) -> None:
    """Test parsing of environment values into typed values."""
    assert ConfigManager._parse_env_value(value) == expected


def test_config_manager_shutdown() -> None:
    """Test that shutdown marks the manager uninitialized."""
    manager = ConfigManager(env={})
    manager.initialize()
    manager.shutdown()

    assert not manager.initialized
    assert manager.status()["initialized"] is False

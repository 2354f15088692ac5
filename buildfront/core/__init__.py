"""Core managers for buildfront."""

from buildfront.core.config_manager import ConfigManager, ConfigSchema
from buildfront.core.logging_manager import LoggingManager

__all__ = ["ConfigManager", "ConfigSchema", "LoggingManager"]

from __future__ import annotations

import os
from copy import deepcopy
from typing import Any, Dict, List, Mapping, Optional, Set

from pydantic import BaseModel, Field, ValidationError, model_validator

from buildfront.core.base import BuildfrontManager
from buildfront.utils.exceptions import ConfigurationError, ManagerInitializationError

LOG_LEVEL_NAMES = ('debug', 'info', 'warning', 'error', 'critical')
LOG_FORMATS = ('text', 'json')


class ConfigSchema(BaseModel):
    """Schema for validating front-end configuration data.

    These settings control buildfront itself. What gets passed to the build
    tool is described by :class:`buildfront.build.config.BuildConfig`.
    """
    logging: Dict[str, Any] = Field(
        default_factory=lambda: {
            'level': 'WARNING',
            'format': 'text',
            'console': {
                'enabled': True,
            },
            'file': {
                'enabled': False,
                'path': 'logs/buildfront.log',
                'rotation': '10 MB',
                'retention': '5 days',
            },
        },
        description='Logging settings',
    )

    @model_validator(mode='after')
    def validate_logging(self) -> 'ConfigSchema':
        """Validate the logging level and format names."""
        level = str(self.logging.get('level', 'WARNING')).lower()
        if level not in LOG_LEVEL_NAMES:
            raise ValueError(f"Unknown log level '{level}'.")
        log_format = str(self.logging.get('format', 'text')).lower()
        if log_format not in LOG_FORMATS:
            raise ValueError(f"Unknown log format '{log_format}'.")
        return self


class ConfigManager(BuildfrontManager):
    """Configuration manager for buildfront's own settings.

    Starts from the :class:`ConfigSchema` defaults and overrides them with
    prefixed environment variables, so ``BUILDFRONT_LOGGING_LEVEL=debug``
    sets ``logging.level``.

    Attributes:
        _env: Environment mapping to read overrides from
        _env_prefix: Prefix for environment variables
        _config: The loaded configuration
        _env_vars_applied: Set of applied environment variables
    """

    def __init__(
            self,
            env: Optional[Mapping[str, str]] = None,
            env_prefix: str = 'BUILDFRONT_'
    ) -> None:
        """Initialize the configuration manager.

        Args:
            env: Environment mapping, defaults to ``os.environ``
            env_prefix: Prefix for environment variables
        """
        super().__init__(name='config_manager')
        self._env: Mapping[str, str] = os.environ if env is None else env
        self._env_prefix = env_prefix
        self._config: Dict[str, Any] = {}
        self._env_vars_applied: Set[str] = set()

    def initialize(self) -> None:
        """Initialize the configuration manager.

        Loads the default schema, then applies environment variables.

        Raises:
            ManagerInitializationError: If initialization fails
        """
        try:
            self._config = ConfigSchema().model_dump()
            self._apply_env_vars()
            self._validate_config()

            self._initialized = True
            self._healthy = True
        except ConfigurationError as e:
            raise ManagerInitializationError(
                f'Failed to initialize ConfigManager: {str(e)}',
                manager_name=self.name,
                details=e.details
            ) from e

    def _apply_env_vars(self) -> None:
        """Apply environment variables to the configuration."""
        for env_name, env_value in self._env.items():
            if not env_name.startswith(self._env_prefix):
                continue

            config_path = env_name[len(self._env_prefix):].lower().split('_')
            self._set_nested_value(self._config, config_path, self._parse_env_value(env_value))
            self._env_vars_applied.add(env_name)

    @staticmethod
    def _parse_env_value(value: str) -> Any:
        """Parse environment variable values into appropriate types.

        Args:
            value: The string value from the environment

        Returns:
            The parsed value (bool, int, float, or string)
        """
        if value.lower() in ('true', 'yes', '1', 'on'):
            return True
        if value.lower() in ('false', 'no', '0', 'off'):
            return False

        try:
            if value.isdigit() or (value.startswith('-') and value[1:].isdigit()):
                return int(value)
            return float(value)
        except ValueError:
            return value

    def _set_nested_value(self, config: Dict[str, Any], path: List[str], value: Any) -> None:
        """Set a nested value in the configuration dictionary.

        Args:
            config: The configuration dictionary
            path: List of keys forming the path to the value
            value: The value to set
        """
        if not path:
            return

        if len(path) == 1:
            config[path[0]] = value
            return

        key = path[0]
        if key not in config:
            config[key] = {}
        if not isinstance(config[key], dict):
            config[key] = {}

        self._set_nested_value(config[key], path[1:], value)

    def _validate_config(self) -> None:
        """Validate the configuration against the schema.

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        try:
            self._config = ConfigSchema(**self._config).model_dump()
        except ValidationError as e:
            errors = e.errors()
            error_details = ', '.join((
                f"{'.'.join((str(loc) for loc in error['loc']))}: {error['msg']}"
                for error in errors
            ))
            raise ConfigurationError(
                f'Invalid configuration: {error_details}',
                details={'validation_errors': errors}
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by key.

        Args:
            key: The configuration key (dot-separated for nested values)
            default: Default value if the key doesn't exist

        Returns:
            A copy of the configuration value, or default

        Raises:
            ConfigurationError: If the manager isn't initialized
        """
        if not self._initialized:
            raise ConfigurationError(
                'Cannot access configuration before initialization',
                config_key=key
            )

        result: Any = self._config
        try:
            for part in key.split('.'):
                result = result[part]
            return deepcopy(result)
        except (KeyError, TypeError):
            return default

    def shutdown(self) -> None:
        """Shut down the configuration manager."""
        self._initialized = False
        self._healthy = False

    def status(self) -> Dict[str, Any]:
        """Get the status of the configuration manager.

        Returns:
            Dict[str, Any]: Status information about the configuration manager.
        """
        status = super().status()
        status.update({
            'env_prefix': self._env_prefix,
            'env_vars_applied': sorted(self._env_vars_applied),
        })
        return status

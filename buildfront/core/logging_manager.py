from __future__ import annotations

import atexit
import logging
import logging.handlers
import os
import pathlib
import sys
from typing import Any, Dict, List, Optional, Union

import structlog
from pythonjsonlogger.json import JsonFormatter

from buildfront.core.base import BuildfrontManager
from buildfront.utils.exceptions import ManagerInitializationError, ManagerShutdownError


class LoggingManager(BuildfrontManager):
    """Manages logging configuration and access for buildfront.

    Console output goes to stderr. The build tool owns stdout, and nothing
    buildfront logs may end up interleaved with it.
    """

    # Mapping from string log levels to logging module constants
    LOG_LEVELS = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
        "critical": logging.CRITICAL,
    }

    def __init__(self, config_manager: Any, level: Optional[str] = None) -> None:
        """Initialize the Logging Manager.

        Args:
            config_manager: The Configuration Manager to use for logging settings.
            level: Optional level name that overrides the configured one.
        """
        super().__init__(name="logging_manager")
        self._config_manager = config_manager
        self._level_override = level
        self._root_logger: Optional[logging.Logger] = None
        self._file_handler: Optional[logging.Handler] = None
        self._console_handler: Optional[logging.Handler] = None
        self._log_directory: Optional[pathlib.Path] = None
        self._enable_structlog = False
        self._handlers: List[logging.Handler] = []
        self._previous_handlers: List[logging.Handler] = []
        self._previous_level: int = logging.WARNING

    def initialize(self) -> None:
        """Initialize the Logging Manager.

        Raises:
            ManagerInitializationError: If initialization fails.
        """
        try:
            logging_config = self._config_manager.get("logging", {})
            log_level_str = (self._level_override or logging_config.get("level", "WARNING")).lower()
            log_level = self.LOG_LEVELS.get(log_level_str, logging.WARNING)
            log_format = logging_config.get("format", "text").lower()

            self._root_logger = logging.getLogger()
            self._previous_level = self._root_logger.level
            self._previous_handlers = list(self._root_logger.handlers)
            self._root_logger.setLevel(log_level)

            for handler in self._previous_handlers:
                self._root_logger.removeHandler(handler)

            if log_format == "json":
                self._enable_structlog = True
                formatter = self._create_json_formatter()
            else:
                formatter = logging.Formatter("buildfront: %(levelname)s: %(message)s")

            if logging_config.get("console", {}).get("enabled", True):
                self._console_handler = logging.StreamHandler(sys.stderr)
                self._console_handler.setLevel(log_level)
                self._console_handler.setFormatter(formatter)
                self._root_logger.addHandler(self._console_handler)
                self._handlers.append(self._console_handler)

            file_config = logging_config.get("file", {})
            if file_config.get("enabled", False):
                file_path = file_config.get("path", "logs/buildfront.log")
                self._log_directory = pathlib.Path(file_path).parent
                os.makedirs(self._log_directory, exist_ok=True)

                rotation = file_config.get("rotation", "10 MB")
                retention = file_config.get("retention", "5 days")

                # Parse rotation (e.g., "10 MB")
                if isinstance(rotation, str) and "MB" in rotation:
                    max_bytes = int(rotation.split()[0]) * 1024 * 1024
                else:
                    max_bytes = 10 * 1024 * 1024

                # Parse retention (e.g., "5 days")
                if isinstance(retention, str) and "days" in retention:
                    backup_count = int(retention.split()[0])
                else:
                    backup_count = 5

                self._file_handler = logging.handlers.RotatingFileHandler(
                    file_path,
                    maxBytes=max_bytes,
                    backupCount=backup_count,
                )
                self._file_handler.setLevel(log_level)
                self._file_handler.setFormatter(formatter)
                self._root_logger.addHandler(self._file_handler)
                self._handlers.append(self._file_handler)

            if self._enable_structlog:
                self._configure_structlog()

            atexit.register(self.shutdown)

            self._root_logger.debug("Logging Manager initialized")

            self._initialized = True
            self._healthy = True

        except (OSError, ValueError, AttributeError) as e:
            self._restore_root_logger()
            raise ManagerInitializationError(
                f"Failed to initialize LoggingManager: {str(e)}",
                manager_name=self.name,
            ) from e

    def _create_json_formatter(self) -> logging.Formatter:
        """Create a JSON formatter for log records.

        Returns:
            logging.Formatter: A formatter that outputs logs in JSON format.
        """
        return JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
            json_ensure_ascii=False,
        )

    def _configure_structlog(self) -> None:
        """Configure structlog to hand event dicts to the stdlib JSON formatter."""
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                structlog.stdlib.render_to_log_kwargs,
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def get_logger(self, name: str) -> Union[logging.Logger, Any]:
        """Get a logger for a specific component.

        Args:
            name: The name of the component requesting a logger.

        Returns:
            Union[logging.Logger, Any]: A structlog logger when JSON output is
            enabled, a standard library logger otherwise.
        """
        if not self._initialized:
            return logging.getLogger(name)

        if self._enable_structlog:
            return structlog.get_logger(name)
        return logging.getLogger(name)

    def _restore_root_logger(self) -> None:
        """Detach the handlers installed here and put back the previous ones."""
        for handler in self._handlers:
            if self._root_logger:
                self._root_logger.removeHandler(handler)
            handler.flush()
            handler.close()
        self._handlers = []
        self._console_handler = None
        self._file_handler = None

        if self._root_logger:
            for handler in self._previous_handlers:
                self._root_logger.addHandler(handler)
            self._root_logger.setLevel(self._previous_level)
        self._previous_handlers = []

    def shutdown(self) -> None:
        """Shut down the Logging Manager.

        Detaches and closes all handlers it installed.

        Raises:
            ManagerShutdownError: If shutdown fails.
        """
        if not self._initialized:
            return

        try:
            self._restore_root_logger()

            if self._enable_structlog:
                structlog.reset_defaults()

            atexit.unregister(self.shutdown)

            self._initialized = False
            self._healthy = False

        except (OSError, ValueError) as e:
            raise ManagerShutdownError(
                f"Failed to shut down LoggingManager: {str(e)}",
                manager_name=self.name,
            ) from e

    def status(self) -> Dict[str, Any]:
        """Get the status of the Logging Manager.

        Returns:
            Dict[str, Any]: Status information about the Logging Manager.
        """
        status = super().status()

        if self._initialized:
            status.update(
                {
                    "log_directory": str(self._log_directory)
                    if self._log_directory
                    else None,
                    "handlers": {
                        "console": self._console_handler is not None,
                        "file": self._file_handler is not None,
                    },
                    "structured_logging": self._enable_structlog,
                }
            )

        return status

"""Build configuration for buildfront.

This module contains the operation set and the configuration model that
together determine the argument list handed to the external build tool.
"""

from __future__ import annotations

import enum
from typing import Dict, List, Mapping, Optional, Tuple, Union

import pydantic

from buildfront.utils.exceptions import ConfigurationError, UnknownOperationError

DEFAULT_TOOL = "cargo"

# Environment variable consulted for each BuildConfig field.
ENV_VARS: Dict[str, str] = {
    "verbose": "VERBOSE",
    "flags": "FLAGS",
    "tool": "BUILD_TOOL",
}


class Operation(str, enum.Enum):
    """Operations the build tool can be asked to perform."""

    DEFAULT = "default"  # Debug build
    RELEASE = "release"  # Optimized build
    CLEAN = "clean"  # Remove build artifacts

    @classmethod
    def parse(cls, name: Optional[Union[str, Operation]]) -> Operation:
        """Resolve an operation name, treating ``None`` as the default build.

        Args:
            name: Operation name as given on the command line.

        Returns:
            The matching Operation.

        Raises:
            UnknownOperationError: If the name is not one of the known operations.
        """
        if name is None:
            return cls.DEFAULT
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            raise UnknownOperationError(name, choices=[op.value for op in cls]) from None

    @property
    def base_args(self) -> List[str]:
        """Subcommand tokens the build tool is invoked with for this operation."""
        return list(_BASE_ARGS[self])


_BASE_ARGS: Dict[Operation, Tuple[str, ...]] = {
    Operation.DEFAULT: ("build",),
    Operation.RELEASE: ("build", "--release"),
    Operation.CLEAN: ("clean",),
}


class BuildConfig(pydantic.BaseModel):
    """Configuration for a single build tool invocation.

    Instances are immutable. Build one per invocation with :meth:`from_env`.

    Attributes:
        verbose: Whether to pass ``--verbose`` to the build tool
        flags: Extra arguments appended after all other arguments
        tool: Name or path of the build tool executable
    """

    model_config = pydantic.ConfigDict(frozen=True)

    verbose: bool = False
    flags: Tuple[str, ...] = ()
    tool: str = DEFAULT_TOOL

    @pydantic.field_validator("verbose", mode="before")
    @classmethod
    def validate_verbose(cls, v):
        """Only the literal string "1" switches verbosity on."""
        if isinstance(v, str):
            return v == "1"
        return bool(v)

    @pydantic.field_validator("flags", mode="before")
    @classmethod
    def validate_flags(cls, v):
        """Split a flag string on whitespace, keeping order."""
        if v is None:
            return ()
        if isinstance(v, str):
            return tuple(v.split())
        return tuple(v)

    @pydantic.field_validator("tool", mode="before")
    @classmethod
    def validate_tool(cls, v):
        """Fall back to the default tool when unset or blank."""
        if v is None or not str(v).strip():
            return DEFAULT_TOOL
        return str(v).strip()

    def to_tool_args(self, operation: Union[str, Operation, None] = None) -> List[str]:
        """Convert the configuration to build tool command-line arguments.

        Args:
            operation: Operation to compose arguments for.

        Returns:
            Base subcommand tokens, then ``--verbose`` if enabled, then the
            extra flags.
        """
        args = Operation.parse(operation).base_args

        if self.verbose:
            args.append("--verbose")

        # User flags last so they win with last-wins tools
        args.extend(self.flags)

        return args

    @classmethod
    def from_env(
            cls,
            env: Mapping[str, str],
            overrides: Optional[Mapping[str, str]] = None
    ) -> BuildConfig:
        """Create a BuildConfig from environment variables.

        Args:
            env: Environment mapping (variable name to string value).
            overrides: Variables that take precedence over ``env``, keyed the
                same way (e.g. ``{"VERBOSE": "1"}``).

        Returns:
            BuildConfig instance.

        Raises:
            ConfigurationError: If a value cannot be validated.
        """
        merged = dict(env)
        merged.update(overrides or {})

        values = {
            field: merged[var] for field, var in ENV_VARS.items() if var in merged
        }
        try:
            return cls(**values)
        except pydantic.ValidationError as e:
            raise ConfigurationError(
                f"Invalid build configuration: {e}",
                details={"validation_errors": e.errors()}
            ) from e

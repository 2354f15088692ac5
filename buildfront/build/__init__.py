"""Build dispatch for buildfront.

This package turns an operation name and an environment into a single
invocation of the external build tool.

Modules:
    builder: Builder class and the run entry point
    config: Operation set and build configuration model
    cli: Command-line interface
    utils: Helpers for assignments, executable lookup and exit statuses
"""

from __future__ import annotations

from buildfront.build.builder import Builder, compose_args, run
from buildfront.build.config import BuildConfig, Operation
from buildfront.build.cli import main as build_cli

__all__ = [
    "Builder",
    "BuildConfig",
    "Operation",
    "build_cli",
    "compose_args",
    "run",
]

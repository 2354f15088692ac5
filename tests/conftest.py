"""Pytest configuration and fixtures for buildfront tests."""

import os
import stat
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

# Stand-in for the build tool: records its arguments one per line, prints a
# marker line, dumps its environment to $STUB_ENV_RECORD when set, and exits
# with $STUB_EXIT (or dies from $STUB_SIGNAL).
STUB_SCRIPT = """#!/bin/sh
if [ -n "$STUB_RECORD" ]; then
    : > "$STUB_RECORD"
    for arg in "$@"; do
        printf '%s\\n' "$arg" >> "$STUB_RECORD"
    done
fi
if [ -n "$STUB_ENV_RECORD" ]; then
    env > "$STUB_ENV_RECORD"
fi
echo "stub tool output"
if [ -n "$STUB_SIGNAL" ]; then
    kill -"$STUB_SIGNAL" $$
fi
exit "${STUB_EXIT:-0}"
"""

BUILD_ENV_VARS = (
    "VERBOSE",
    "FLAGS",
    "BUILD_TOOL",
    "BUILDFRONT_LOGGING_LEVEL",
    "BUILDFRONT_LOGGING_FORMAT",
    "STUB_RECORD",
    "STUB_ENV_RECORD",
    "STUB_EXIT",
    "STUB_SIGNAL",
)

@pytest.fixture(autouse=True)
def clean_build_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep variables from the developer's shell out of the tests."""
    for name in BUILD_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def stub_tool(tmp_path: Path) -> Path:
    """Create an executable stub build tool."""
    path = tmp_path / "bin" / "stub-cargo"
    path.parent.mkdir()
    path.write_text(STUB_SCRIPT)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def record_file(tmp_path: Path) -> Path:
    """Path the stub tool writes its arguments to."""
    return tmp_path / "argv.txt"


@pytest.fixture
def read_record(record_file: Path) -> Callable[[], Optional[List[str]]]:
    """Return a reader for the arguments recorded by the stub tool."""

    def read() -> Optional[List[str]]:
        if not record_file.exists():
            return None
        return record_file.read_text().splitlines()

    return read


@pytest.fixture
def stub_env(stub_tool: Path, record_file: Path) -> Dict[str, str]:
    """Environment that points BUILD_TOOL at the stub tool."""
    env = dict(os.environ)
    env["BUILD_TOOL"] = str(stub_tool)
    env["STUB_RECORD"] = str(record_file)
    return env

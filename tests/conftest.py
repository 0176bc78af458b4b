from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures building loggers that write into a temporary directory
   and print into an in-memory stream.
"""

import io
import os
import sys
import time
from pathlib import Path
from typing import Any, Callable, Generator, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from systemlog.core.validator import validate_config  # noqa: E402
from systemlog.domain.errors import LoggerNotInitializedError  # noqa: E402
from systemlog.logger import Logger, get_default_logger, set_default_logger  # noqa: E402

# Fixed instant: 2024-03-05 14:07:09 local time
FIXED_EPOCH = time.mktime((2024, 3, 5, 14, 7, 9, 0, 0, -1))


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def fixed_clock() -> Callable[[], float]:
    """Return a clock frozen at FIXED_EPOCH."""
    return lambda: FIXED_EPOCH


@pytest.fixture
def console() -> io.StringIO:
    """In-memory replacement for stdout."""
    return io.StringIO()


@pytest.fixture
def make_logger(tmp_path: Path, console: io.StringIO) -> Generator[Callable[..., Logger], None, None]:
    """
    Provide a factory for loggers rooted in a temporary directory.

    Every logger built through the factory is closed at teardown, so no
    archive worker outlives its test.

    Yields:
        Callable[..., Logger]: factory(**config_overrides) -> Logger.
    """
    created: List[Logger] = []

    def factory(**overrides: Any) -> Logger:
        raw = {"name": "errors", "directory": str(tmp_path), "level": 4, "size_mb": 1}
        raw.update(overrides)
        config, _ = validate_config(raw, strict=True)
        log = Logger(config, stream=console)
        created.append(log)
        return log

    yield factory

    for log in created:
        log.close()


@pytest.fixture(autouse=True)
def reset_default_logger() -> Generator[None, None, None]:
    """Make sure no test leaks a process-wide default logger."""
    yield
    try:
        get_default_logger().close()
    except LoggerNotInitializedError:
        pass
    set_default_logger(None)

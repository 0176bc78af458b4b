from __future__ import annotations

"""
systemlog: leveled application logger with size-rotated, zip-archived files.

Typical use::

    from systemlog import create_logger

    log = create_logger("errors", "logs", level=4, size_mb=1)
    log.warning("count=%d", 42)
"""

from systemlog.core.formatter import Formatter, LogLine, sprintf
from systemlog.domain.config import LoggerConfig
from systemlog.domain.errors import (
    ArchiveError,
    LoggerNotInitializedError,
    SinkError,
    SystemLogError,
)
from systemlog.domain.levels import Level
from systemlog.logger import (
    Logger,
    create_logger,
    get_default_logger,
    set_default_logger,
)

__version__ = "1.0.0"

__all__ = [
    "ArchiveError",
    "Formatter",
    "Level",
    "LogLine",
    "Logger",
    "LoggerConfig",
    "LoggerNotInitializedError",
    "SinkError",
    "SystemLogError",
    "create_logger",
    "get_default_logger",
    "set_default_logger",
    "sprintf",
]

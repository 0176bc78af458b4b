from __future__ import annotations

"""
Error Hierarchy.

File-facing operations (append, archive, stale-file cleanup) raise these
errors. The logger facade catches them so that a logging call never fails.
"""

from typing import Optional


class SystemLogError(Exception):
    """Base class for every error raised by the logger."""


class SinkError(SystemLogError, OSError):
    """
    Raised when the active log file cannot be opened, written or rotated.

    Attributes:
        path: File the failing operation targeted.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class ArchiveError(SystemLogError, OSError):
    """
    Raised when a rotated log file cannot be compressed.

    Attributes:
        path: Backup file that was being archived.
        step: Name of the archive step that failed.
    """

    def __init__(self, message: str, path: str, step: str) -> None:
        super().__init__(message)
        self.path = path
        self.step = step

    def __str__(self) -> str:
        return f"{self.step} failed for {self.path}: {self.args[0]}"


class LoggerNotInitializedError(SystemLogError, RuntimeError):
    """Raised when the default logger is requested before create_logger()."""

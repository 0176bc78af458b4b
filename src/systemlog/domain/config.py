from __future__ import annotations

"""
Logger Configuration Model.

Defines the immutable configuration of a logger instance and derives the
names of its on-disk artifacts (active log, backup, archive) from the
configured directory and base name.
"""

import os
from dataclasses import dataclass

from systemlog.domain.levels import Level, parse_level
from systemlog.infra.fs import normalize_directory

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
DEFAULT_NAME = "errors"
DEFAULT_LEVEL = Level.DEBUG
DEFAULT_SIZE_MB = 1

BYTES_PER_MB = 1_000_000

LOG_EXTENSION = ".log"
BACKUP_SUFFIX = "_bkp"
ARCHIVE_EXTENSION = ".zip"

DEFAULT_REMOVE_RETRIES = 3
DEFAULT_RETRY_DELAY = 0.1


# -----------------------------------------------------------------------------
# Configuration Model
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class LoggerConfig:
    """
    Immutable specification of a logger instance.

    The directory is normalised and the level coerced on construction, so a
    config built directly (without validate_config) yields the same paths.

    Attributes:
        name: Base name of the log file (without extension).
        directory: Target directory, always terminated by a path separator.
        level: Most verbose severity that is emitted.
        size_mb: Rotation threshold in megabytes (0 disables persistence).
        console: Print emitted records to standard output.
        color: Embed ANSI colour sequences in console tags.
        persist_all: Persist INFO and DEBUG records as well.
        info_location: Include the caller location on INFO records.
        remove_retries: Extra attempts when a file cannot be removed.
        retry_delay: Pause between removal attempts, in seconds.
    """
    name: str = DEFAULT_NAME
    directory: str = "." + os.sep
    level: Level = DEFAULT_LEVEL
    size_mb: int = DEFAULT_SIZE_MB

    console: bool = True
    color: bool = False
    persist_all: bool = False
    info_location: bool = True

    remove_retries: int = DEFAULT_REMOVE_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY

    def __post_init__(self) -> None:
        if self.size_mb < 0:
            raise ValueError(f"size_mb must be >= 0, got {self.size_mb}")
        # Frozen: normalise through object.__setattr__
        object.__setattr__(self, "directory", normalize_directory(self.directory))
        object.__setattr__(self, "level", parse_level(self.level))

    @property
    def threshold_bytes(self) -> int:
        return self.size_mb * BYTES_PER_MB

    @property
    def persistence_enabled(self) -> bool:
        return self.size_mb > 0

    @property
    def base_path(self) -> str:
        """Directory joined with the base name, without any extension."""
        return self.directory + self.name

    @property
    def log_path(self) -> str:
        return self.base_path + LOG_EXTENSION

    @property
    def backup_path(self) -> str:
        return self.base_path + BACKUP_SUFFIX + LOG_EXTENSION

    @property
    def archive_path(self) -> str:
        return self.backup_path + ARCHIVE_EXTENSION


def archive_path_for(path: str) -> str:
    """Return the zip archive name used for a given backup file."""
    return path + ARCHIVE_EXTENSION

from __future__ import annotations

"""
File Sink.

Owns the active log file. Appends formatted lines, tracks the file size and
rotates the file once it grows past the configured threshold: the handle is
closed, the file is renamed to the backup name and the backup is handed to
the archiver without waiting for compression. Every file operation happens
under a single lock, so at most one thread appends, measures or rotates at
a time.
"""

import logging
import os
import shutil
import threading
from typing import IO, Optional

from systemlog.domain.config import LoggerConfig
from systemlog.domain.errors import SinkError
from systemlog.infra.archiver import Archiver
from systemlog.infra.fs import ensure_parent_dir, file_size, remove_with_retry

logger = logging.getLogger(__name__)


class FileSink:
    """
    Size-rotated append-only log file.

    A threshold of zero disables persistence: append() becomes a no-op and
    the sink never creates any file. Text that cannot be encoded (lone
    surrogates from undecodable file names) is written backslash-escaped.

    Rotation waits on the archiver's lock for the backup path. While a
    compression of that backup is still running, the rotating append (and
    every other writer, queued on the sink lock) blocks until it finishes;
    otherwise rotation returns right after the rename.

    Args:
        config: Logger configuration providing paths and threshold.
        archiver: Service compressing rotated files in the background.
    """

    def __init__(self, config: LoggerConfig, archiver: Archiver) -> None:
        self.log_path = config.log_path
        self.backup_path = config.backup_path
        self.archive_path = config.archive_path
        self.threshold = config.threshold_bytes
        self._retries = config.remove_retries
        self._retry_delay = config.retry_delay

        self._archiver = archiver
        self._lock = threading.Lock()
        self._handle: Optional[IO[str]] = None
        self.rotations = 0

    @property
    def enabled(self) -> bool:
        return self.threshold > 0

    @property
    def size(self) -> int:
        """Current size of the active file in bytes."""
        with self._lock:
            if self._handle is not None:
                return os.fstat(self._handle.fileno()).st_size
            return file_size(self.log_path)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def append(self, line: str) -> None:
        """
        Append one line to the active file, rotating it when oversized.

        Args:
            line: Formatted record without trailing newline.

        Raises:
            SinkError: If the file cannot be opened, written or rotated.
        """
        if not self.enabled:
            return

        with self._lock:
            handle = self._open()
            try:
                handle.write(line + "\n")
                handle.flush()
                size = os.fstat(handle.fileno()).st_size
            except (OSError, ValueError) as e:
                self._close()
                raise SinkError(f"Cannot write '{self.log_path}': {e}", self.log_path) from e

            if size > self.threshold:
                self._rotate(size)

    def remove_stale(self) -> None:
        """
        Delete the active, backup and archive files left by a previous run.

        Missing files count as removed. Each file gets bounded retries.

        Raises:
            SinkError: If a file still cannot be removed after the retries.
        """
        with self._lock:
            self._close()
            for path in (self.log_path, self.backup_path, self.archive_path):
                try:
                    remove_with_retry(path, self._retries, self._retry_delay)
                except OSError as e:
                    raise SinkError(f"Cannot remove stale file '{path}': {e}", path) from e

    def close(self) -> None:
        """Close the active file handle; the next append reopens it."""
        with self._lock:
            self._close()

    # -------------------------------------------------------------------------
    # Private Helpers (caller holds the lock)
    # -------------------------------------------------------------------------

    def _open(self) -> IO[str]:
        if self._handle is not None:
            return self._handle
        try:
            self._handle = open(self.log_path, "a", encoding="utf-8", errors="backslashreplace")
        except FileNotFoundError:
            # Fallback: the directory is missing, create it and retry once
            try:
                ensure_parent_dir(self.log_path)
                self._handle = open(self.log_path, "a", encoding="utf-8", errors="backslashreplace")
            except OSError as e:
                raise SinkError(f"Cannot create '{self.log_path}': {e}", self.log_path) from e
        except OSError as e:
            raise SinkError(f"Cannot open '{self.log_path}': {e}", self.log_path) from e
        return self._handle

    def _close(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.close()
        except OSError as e:
            logger.warning(f"Closing '{self.log_path}' failed: {e}")

    def _rotate(self, size: int) -> None:
        """Move the active file to the backup name and schedule its archive."""
        self._close()
        try:
            with self._archiver.path_lock(self.backup_path):
                if os.path.exists(self.backup_path) and self._archiver.is_pending(self.backup_path):
                    # Previous backup not compressed yet: extend it rather than overwrite it
                    self._merge_into_backup()
                else:
                    os.replace(self.log_path, self.backup_path)
        except OSError as e:
            raise SinkError(f"Cannot rotate '{self.log_path}': {e}", self.log_path) from e

        self.rotations += 1
        logger.debug(f"Rotated '{self.log_path}' at {size} bytes (threshold {self.threshold})")
        self._archiver.submit(self.backup_path)

    def _merge_into_backup(self) -> None:
        with open(self.log_path, "rb") as src, open(self.backup_path, "ab") as dst:
            shutil.copyfileobj(src, dst)
        os.remove(self.log_path)

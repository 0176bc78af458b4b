from __future__ import annotations

"""
Log Archiving Service.

Compresses a rotated log file into a single-entry zip archive and deletes
the uncompressed copy. Jobs run on a single background worker so that the
write that triggered a rotation never waits for compression, and so that at
most one compression touches the log directory at a time.

Each backup path has a lock held for the whole compression. The file sink
takes the same lock while renaming the active file to the backup name, so a
rename can never interleave with a compression of that path.
"""

import logging
import os
import shutil
import threading
import zipfile
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from typing import Callable, Dict, Optional, Set

from systemlog.domain.config import (
    DEFAULT_REMOVE_RETRIES,
    DEFAULT_RETRY_DELAY,
    archive_path_for,
)
from systemlog.domain.errors import ArchiveError
from systemlog.infra.fs import remove_with_retry

logger = logging.getLogger(__name__)

# Copy buffer used when streaming the backup into the archive entry
_CHUNK_SIZE = 64 * 1024

ArchivedCallback = Callable[[str], None]
FailedCallback = Callable[[str, Exception], None]


class Archiver:
    """
    Compress rotated log files, synchronously or in the background.

    Args:
        on_archived: Called with the archive path after a background job succeeds.
        on_failed: Called with the backup path and the error after a background job fails.
        retries: Extra attempts when the previous archive cannot be removed.
        retry_delay: Seconds between removal attempts.
    """

    def __init__(
            self,
            on_archived: Optional[ArchivedCallback] = None,
            on_failed: Optional[FailedCallback] = None,
            retries: int = DEFAULT_REMOVE_RETRIES,
            retry_delay: float = DEFAULT_RETRY_DELAY,
    ) -> None:
        self.on_archived = on_archived
        self.on_failed = on_failed
        self._retries = retries
        self._retry_delay = retry_delay

        self._guard = threading.Lock()
        self._path_locks: Dict[str, threading.Lock] = {}
        self._pending: Dict[str, Future] = {}
        self._inflight: Set[Future] = set()
        self._executor: Optional[ThreadPoolExecutor] = None

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def path_lock(self, path: str) -> threading.Lock:
        """Return the lock serialising renames and compressions of a path."""
        key = os.path.abspath(path)
        with self._guard:
            lock = self._path_locks.get(key)
            if lock is None:
                lock = self._path_locks[key] = threading.Lock()
            return lock

    def is_pending(self, path: str) -> bool:
        """Report whether a background job for this path has not started yet."""
        with self._guard:
            return os.path.abspath(path) in self._pending

    def archive(self, path: str) -> str:
        """
        Compress a backup file into '<path>.zip' and delete the backup.

        Steps: remove any previous archive (with bounded retries), create the
        archive, stream the backup into a single deflated entry named after
        the backup file, then delete the backup.

        Args:
            path: Backup log file to compress.

        Returns:
            str: Path of the created archive.

        Raises:
            ArchiveError: If any step fails.
        """
        zip_path = archive_path_for(path)

        try:
            remove_with_retry(zip_path, self._retries, self._retry_delay)
        except OSError as e:
            raise ArchiveError(str(e), path, "remove previous archive") from e

        try:
            with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                with open(path, "rb") as src, zf.open(os.path.basename(path), "w") as dst:
                    shutil.copyfileobj(src, dst, _CHUNK_SIZE)
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveError(str(e), path, "write archive") from e

        try:
            remove_with_retry(path, self._retries, self._retry_delay)
        except OSError as e:
            raise ArchiveError(str(e), path, "remove backup") from e

        logger.debug(f"Archived '{path}' into '{zip_path}'")
        return zip_path

    def submit(self, path: str) -> Future:
        """
        Schedule a background archive of a backup file.

        Requests for a path that already has a job waiting are coalesced
        into that job.

        Args:
            path: Backup log file to compress.

        Returns:
            Future: Resolves to the archive path, or to None if the backup
                    had already been consumed.
        """
        key = os.path.abspath(path)
        with self._guard:
            existing = self._pending.get(key)
            if existing is not None:
                return existing
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="systemlog-archiver")
            future = self._executor.submit(self._run, path)
            self._pending[key] = future
            self._inflight.add(future)

        future.add_done_callback(self._forget)
        return future

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every scheduled job has finished.

        Returns:
            bool: True if all jobs finished within the timeout.
        """
        with self._guard:
            futures = list(self._inflight)
        if not futures:
            return True
        _, not_done = wait_futures(futures, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        """
        Stop the background worker.

        With wait=True, jobs scheduled by result callbacks while draining
        run on a fresh worker and are drained as well.
        """
        while True:
            with self._guard:
                executor, self._executor = self._executor, None
            if executor is None:
                return
            executor.shutdown(wait=wait)
            if not wait:
                return

    # -------------------------------------------------------------------------
    # Background Job
    # -------------------------------------------------------------------------

    def _run(self, path: str) -> Optional[str]:
        """Worker body: archive under the path lock, then notify."""
        key = os.path.abspath(path)
        zip_path: Optional[str] = None
        error: Optional[Exception] = None

        try:
            with self.path_lock(path):
                with self._guard:
                    self._pending.pop(key, None)
                if os.path.exists(path):
                    zip_path = self.archive(path)
                else:
                    logger.debug(f"Backup '{path}' already consumed; nothing to archive")
        except ArchiveError as e:
            error = e
            logger.warning(f"Archive of '{path}' failed: {e}")

        # Callbacks run outside the path lock: they log through the file sink
        if error is not None:
            self._notify_failed(path, error)
        elif zip_path is not None:
            self._notify_archived(zip_path)
        return zip_path

    def _forget(self, future: Future) -> None:
        with self._guard:
            self._inflight.discard(future)

    def _notify_archived(self, zip_path: str) -> None:
        if self.on_archived is None:
            return
        try:
            self.on_archived(zip_path)
        except Exception as e:
            logger.warning(f"Archive callback failed: {e}")

    def _notify_failed(self, path: str, error: Exception) -> None:
        if self.on_failed is None:
            return
        try:
            self.on_failed(path, error)
        except Exception as e:
            logger.warning(f"Archive failure callback failed: {e}")

from __future__ import annotations

"""
Logger Facade.

Wires the severity gate, the formatter and the file sink together behind
the public logging methods (print/debug/info/warning/alert). A Logger can
be built from a LoggerConfig and passed around explicitly; create_logger()
additionally installs it as the process-wide default returned by
get_default_logger().

Logging calls never raise. Formatting problems are rendered into the line,
file problems are reported on the 'systemlog' diagnostics logger while the
console output carries on.
"""

import logging
import sys
import threading
from typing import IO, Any, Optional

from systemlog.core.caller import CallerResolver
from systemlog.core.formatter import Formatter, LogLine
from systemlog.core.gate import SeverityGate
from systemlog.core.validator import validate_config
from systemlog.domain.config import LoggerConfig
from systemlog.domain.errors import LoggerNotInitializedError, SinkError
from systemlog.domain.levels import PRINT_LEVEL, Level, tag_for
from systemlog.infra.archiver import Archiver
from systemlog.infra.sink import FileSink

logger = logging.getLogger(__name__)

_default: Optional["Logger"] = None
_default_lock = threading.Lock()


class Logger:
    """
    Leveled application logger with a size-rotated, zip-archived log file.

    Args:
        config: Normalized logger configuration.
        stream: Console stream; defaults to the current sys.stdout.
        formatter: Custom formatter, mostly useful to inject a clock in tests.
    """

    def __init__(
            self,
            config: LoggerConfig,
            stream: Optional[IO[str]] = None,
            formatter: Optional[Formatter] = None,
    ) -> None:
        self.config = config
        self._stream = stream
        self.gate = SeverityGate(config.level, persist_all=config.persist_all)
        self.formatter = formatter or Formatter(
            resolver=CallerResolver(),
            info_location=config.info_location,
        )
        self.archiver = Archiver(
            on_archived=self._on_archived,
            on_failed=self._on_archive_failed,
            retries=config.remove_retries,
            retry_delay=config.retry_delay,
        )
        self.sink = FileSink(config, self.archiver)

    # -------------------------------------------------------------------------
    # Public Logging Methods
    # -------------------------------------------------------------------------

    def print(self, template: Any, *args: Any) -> None:
        """Emit an untagged console line, gated like DEBUG, never persisted."""
        if self.gate.emits(PRINT_LEVEL):
            self._emit(self.formatter.compose("", template, args), persist=False)

    def debug(self, template: Any, *args: Any) -> None:
        self._log(Level.DEBUG, template, args)

    def info(self, template: Any, *args: Any) -> None:
        self._log(Level.INFO, template, args)

    def warning(self, template: Any, *args: Any) -> None:
        self._log(Level.WARNING, template, args)

    def alert(self, template: Any, *args: Any) -> None:
        """Emit an urgent record; never suppressed by the configured level."""
        self._log(Level.ALERT, template, args)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def remove_stale_files(self) -> bool:
        """
        Delete log, backup and archive files left by a previous run.

        Returns:
            bool: True if every stale file is gone.
        """
        try:
            self.sink.remove_stale()
            return True
        except SinkError as e:
            logger.warning(f"Stale log cleanup failed: {e}")
            return False

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for scheduled archives to finish."""
        return self.archiver.wait(timeout)

    def close(self) -> None:
        """Finish pending archives, stop the worker, then close the log file."""
        self.archiver.shutdown(wait=True)
        self.sink.close()

    def __repr__(self) -> str:
        return f"Logger(path={self.config.log_path!r}, level={self.config.level.name})"

    # -------------------------------------------------------------------------
    # Private Helpers
    # -------------------------------------------------------------------------

    def _log(self, level: Level, template: Any, args: tuple) -> None:
        if not self.gate.emits(level):
            return
        line = self.formatter.compose(tag_for(level), template, args)
        self._emit(line, persist=self.gate.persists(level))

    def _emit(self, line: LogLine, persist: bool) -> None:
        if self.config.console:
            self._write_console(line.render(color=self.config.color))
        if persist:
            self._persist(line.render())

    def _write_console(self, text: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        try:
            stream.write(text + "\n")
        except (OSError, ValueError) as e:
            logger.warning(f"Console write failed: {e}")

    def _persist(self, text: str) -> None:
        try:
            self.sink.append(text)
        except SinkError as e:
            logger.warning(f"Log record not persisted: {e}")

    def _on_archived(self, zip_path: str) -> None:
        self.alert("archived log to %s", zip_path)

    def _on_archive_failed(self, path: str, error: Exception) -> None:
        self.alert("archive of %s failed: %s", path, error)


# -----------------------------------------------------------------------------
# FACTORY & DEFAULT INSTANCE
# -----------------------------------------------------------------------------

def create_logger(
        name: str = "",
        directory: str = "",
        level: Any = Level.DEBUG,
        size_mb: int = 1,
        **options: Any,
) -> Logger:
    """
    Create a logger, clear stale files and install it as the default.

    Args:
        name: Base name of the log file; empty means "errors".
        directory: Log directory; empty means the current directory.
        level: Most verbose severity emitted (1=ALERT .. 4=DEBUG).
        size_mb: Rotation threshold in megabytes; 0 disables persistence.
        **options: Further LoggerConfig fields (console, color, persist_all,
                   info_location, remove_retries, retry_delay) and 'stream'.

    Returns:
        Logger: The new default logger.
    """
    global _default

    stream = options.pop("stream", None)
    raw = dict(options, name=name, directory=directory, level=level, size_mb=size_mb)
    config, warnings = validate_config(raw)
    for w in warnings:
        logger.debug(f"Configuration constraint: {w}")

    with _default_lock:
        previous, _default = _default, None
    if previous is not None:
        previous.close()

    instance = Logger(config, stream=stream)
    instance.remove_stale_files()

    with _default_lock:
        _default = instance
    return instance


def get_default_logger() -> Logger:
    """
    Return the logger installed by the last create_logger() call.

    Raises:
        LoggerNotInitializedError: If no logger has been created yet.
    """
    with _default_lock:
        if _default is None:
            raise LoggerNotInitializedError("create_logger() has not been called")
        return _default


def set_default_logger(instance: Optional[Logger]) -> None:
    """Install (or clear, with None) the process-wide default logger."""
    global _default
    with _default_lock:
        _default = instance

from __future__ import annotations

"""
Diagnostics Orchestrator.

Maintains the idempotent lifecycle of the diagnostics channel. Records are
pushed through a QueueHandler and written by a QueueListener thread, so a
slow stderr never delays the thread that is logging.
"""

import atexit
import logging
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from systemlog.infra.logging.config import _LEVEL_MAP, DIAGNOSTICS_LOGGER, LoggingConfig
from systemlog.infra.logging.handlers import (
    _create_stream_handler,
    _is_our_handler,
    _tag_handler,
)

# Internal state flags for idempotency and lifecycle tracking
_CONFIGURED_FLAG_ATTR: str = "_systemlog_configured"
_QUEUE_LISTENER_ATTR: str = "_systemlog_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the 'systemlog' diagnostics logger.

    Repeated calls are no-ops unless force is set, in which case the
    previously attached handlers and listener are torn down first.

    Args:
        cfg: Structural configuration for the diagnostics channel.
        force: If True, bypass idempotency checks and re-initialize handlers.

    Returns:
        logging.Logger: The configured diagnostics logger.
    """
    diag = logging.getLogger(DIAGNOSTICS_LOGGER)

    already_configured = bool(getattr(diag, _CONFIGURED_FLAG_ATTR, False))
    if already_configured and not force:
        return diag

    level_int = _parse_level(cfg.level)
    diag.setLevel(level_int)

    _remove_our_handlers(diag)
    _stop_existing_listener(diag)

    handlers_list: List[logging.Handler] = []
    if cfg.console:
        formatter = logging.Formatter(cfg.fmt, datefmt=cfg.datefmt)
        handlers_list.append(_create_stream_handler(level_int, formatter))

    setattr(diag, _CONFIGURED_FLAG_ATTR, True)
    if not handlers_list:
        return diag

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)

    queue_handler = QueueHandler(log_queue)
    _tag_handler(queue_handler)

    listener = QueueListener(log_queue, *handlers_list, respect_handler_level=True)
    listener.start()

    diag.addHandler(queue_handler)
    diag.propagate = False

    setattr(diag, _QUEUE_LISTENER_ATTR, listener)

    # Flush pending diagnostics on interpreter shutdown
    atexit.register(_safe_stop_listener, listener)

    return diag


def reset_logging() -> None:
    """Detach every managed handler and stop the listener."""
    diag = logging.getLogger(DIAGNOSTICS_LOGGER)
    _remove_our_handlers(diag)
    _stop_existing_listener(diag)
    diag.propagate = True
    if hasattr(diag, _CONFIGURED_FLAG_ATTR):
        delattr(diag, _CONFIGURED_FLAG_ATTR)


def get_logger(name: str) -> logging.Logger:
    """
    Acquire a named logger inside the diagnostics hierarchy.

    Args:
        name: Hierarchical name for the logger (usually __name__).

    Returns:
        logging.Logger: The requested logger instance.
    """
    return logging.getLogger(name)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    """Convert a string-based logging level to its numeric constant."""
    if not level:
        return logging.WARNING
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.WARNING)


def _remove_our_handlers(diag: logging.Logger) -> None:
    for h in list(diag.handlers):
        if _is_our_handler(h):
            diag.removeHandler(h)
            h.close()


def _stop_existing_listener(diag: logging.Logger) -> None:
    listener = getattr(diag, _QUEUE_LISTENER_ATTR, None)
    if listener:
        _safe_stop_listener(listener)
        setattr(diag, _QUEUE_LISTENER_ATTR, None)


def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    """
    Stop a QueueListener, tolerating listeners that were already stopped.

    Called both from reconfiguration and from atexit, so the second call
    must be harmless.
    """
    if not listener:
        return
    if getattr(listener, "_thread", None) is not None:
        listener.stop()

from __future__ import annotations

from .config import DIAGNOSTICS_LOGGER, LoggingConfig
from .core import (
    _QUEUE_LISTENER_ATTR,
    configure_logging,
    get_logger,
    reset_logging,
)
from .handlers import _HANDLER_TAG_ATTR

__all__ = [
    "DIAGNOSTICS_LOGGER",
    "LoggingConfig",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

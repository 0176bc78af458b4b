from __future__ import annotations

"""
Diagnostics Handlers.

Handler factory and the tagging mechanism that lets the diagnostics setup
tell its own handlers apart from handlers a host application attached to
the same logger.
"""

import logging
import sys
from typing import IO, Optional

# Internal attribute used to tag and identify our own handlers
_HANDLER_TAG_ATTR: str = "_systemlog_handler"


def _tag_handler(handler: logging.Handler) -> None:
    """Mark a handler as managed by the diagnostics setup."""
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _create_stream_handler(
        level_int: int,
        formatter: logging.Formatter,
        stream: Optional[IO[str]] = None,
) -> logging.StreamHandler:
    """
    Build a tagged stream handler, writing to stderr by default.

    Args:
        level_int: Numeric logging level.
        formatter: Pre-configured logging formatter.
        stream: Target stream; stdout is reserved for log records.

    Returns:
        logging.StreamHandler: Configured handler.
    """
    sh = logging.StreamHandler(stream if stream is not None else sys.stderr)
    sh.setLevel(level_int)
    sh.setFormatter(formatter)
    _tag_handler(sh)
    return sh

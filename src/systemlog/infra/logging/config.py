from __future__ import annotations

"""
Diagnostics Configuration Model.

The logger reports its own problems (failed appends, retried removals,
archive results) through the standard 'logging' module under the
'systemlog' namespace. This module defines how that channel is set up.
"""

import logging
from dataclasses import dataclass
from typing import Dict

# Logger that owns every internal diagnostic record
DIAGNOSTICS_LOGGER = "systemlog"

# Mapping of string identifiers to native logging constants
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable specification of the diagnostics channel.

    Attributes:
        level: Minimum severity of internal diagnostics to report.
        console: Flag to enable stderr stream output.
        fmt: Structural format of diagnostic lines.
        datefmt: Chronological format for timestamp generation.
    """
    level: str = "WARNING"
    console: bool = True

    fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

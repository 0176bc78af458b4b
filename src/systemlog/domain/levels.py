from __future__ import annotations

"""
Severity Level Definitions.

Declares the ordered set of record severities together with the tags and
terminal colours used when rendering them. Lower ordinals are more urgent.
"""

from enum import IntEnum
from typing import Dict


class Level(IntEnum):
    """
    Ordered record severity.

    A configured level N emits every record whose ordinal is <= N.
    ALERT is emitted regardless of the configured level.
    """
    ALERT = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4


# Print is gated like DEBUG but carries no tag
PRINT_LEVEL: Level = Level.DEBUG

MIN_LEVEL: int = int(Level.ALERT)
MAX_LEVEL: int = int(Level.DEBUG)

TAGS: Dict[Level, str] = {
    Level.ALERT: "ALERT",
    Level.WARNING: "WARN",
    Level.INFO: "INFO",
    Level.DEBUG: "DEBUG",
}

# -----------------------------------------------------------------------------
# CONSOLE COLOURS (ANSI)
# -----------------------------------------------------------------------------
COLOR_RESET: str = "\033[0m"

COLORS: Dict[str, str] = {
    "ALERT": "\033[31m",
    "WARN": "\033[33m",
    "INFO": "\033[32m",
    "DEBUG": "\033[36m",
}


def tag_for(level: Level) -> str:
    """Return the textual tag of a severity."""
    return TAGS[level]


def colorize(tag: str) -> str:
    """
    Wrap a tag in the ANSI colour sequence of its severity.

    Tags carrying a callable suffix (``WARN:pkg.func``) are coloured by
    their severity prefix. Unknown tags are returned unchanged.
    """
    if not tag:
        return tag
    color = COLORS.get(tag.split(":", 1)[0])
    if not color:
        return tag
    return f"{color}{tag}{COLOR_RESET}"


def parse_level(value: object) -> Level:
    """
    Convert a raw level (ordinal or name) into a Level.

    Raises:
        ValueError: If the value does not name a known severity.
    """
    if isinstance(value, Level):
        return value
    if isinstance(value, str):
        key = value.strip().upper()
        if key.isdigit():
            return Level(int(key))
        if key == "WARN":
            return Level.WARNING
        try:
            return Level[key]
        except KeyError:
            raise ValueError(f"Unknown severity level: {value!r}") from None
    if isinstance(value, bool):
        raise ValueError(f"Unknown severity level: {value!r}")
    if isinstance(value, int):
        return Level(value)
    raise ValueError(f"Unknown severity level: {value!r}")

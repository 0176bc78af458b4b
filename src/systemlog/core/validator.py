from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper between untrusted configuration sources (CLI
arguments, dictionaries built by the host program) and the logger. Handles
type coercion, directory normalisation and default injection so that a
logger can always be built from whatever it is given.
"""

import logging
from typing import Any, Dict, List, Tuple

from systemlog.domain.config import (
    DEFAULT_NAME,
    DEFAULT_REMOVE_RETRIES,
    DEFAULT_RETRY_DELAY,
    DEFAULT_SIZE_MB,
    LoggerConfig,
)
from systemlog.domain.levels import MAX_LEVEL, MIN_LEVEL, Level, parse_level

logger = logging.getLogger(__name__)

_BOOL_FIELDS: Dict[str, bool] = {
    "console": True,
    "color": False,
    "persist_all": False,
    "info_location": True,
}


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[LoggerConfig, List[str]]:
    """
    Validate and normalize a raw logger configuration.

    Missing keys take their defaults: an empty name becomes "errors", an
    empty directory becomes the current directory, and the directory is
    always terminated by a path separator.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on invalid values instead of coercing them.

    Returns:
        Tuple[LoggerConfig, List[str]]: The normalized configuration and a
                                        list of warnings.
    """
    warnings: List[str] = []

    if config is None:
        config = {}
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        config = {}

    name = _as_str(config.get("name"), DEFAULT_NAME, "name", warnings, strict)
    directory = _as_str(config.get("directory"), "", "directory", warnings, strict)
    level = _as_level(config.get("level"), warnings, strict)
    size_mb = _as_non_negative_int(config.get("size_mb"), DEFAULT_SIZE_MB, "size_mb", warnings, strict)
    remove_retries = _as_non_negative_int(
        config.get("remove_retries"), DEFAULT_REMOVE_RETRIES, "remove_retries", warnings, strict
    )
    retry_delay = _as_non_negative_float(
        config.get("retry_delay"), DEFAULT_RETRY_DELAY, "retry_delay", warnings, strict
    )

    flags = {
        field: _as_bool(config.get(field), fallback, field, warnings, strict)
        for field, fallback in _BOOL_FIELDS.items()
    }

    cfg = LoggerConfig(
        name=name,
        directory=directory,
        level=level,
        size_mb=size_mb,
        remove_retries=remove_retries,
        retry_delay=retry_delay,
        **flags,
    )
    return cfg, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _reject(msg: str, warnings: List[str], strict: bool, exc: type = TypeError) -> None:
    """Raise in strict mode, otherwise record and log the problem."""
    if strict:
        raise exc(msg)
    warnings.append(f"{msg} Using fallback.")
    logger.warning(msg)


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback
    _reject(f"Invalid field '{field}': expected str, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_level(value: Any, warnings: List[str], strict: bool) -> Level:
    """Resolve a severity, clamping out-of-range ordinals into 1..4."""
    if value is None:
        return Level.DEBUG
    if isinstance(value, int) and not isinstance(value, bool) and not MIN_LEVEL <= value <= MAX_LEVEL:
        clamped = min(max(value, MIN_LEVEL), MAX_LEVEL)
        msg = f"Invalid field 'level': {value} is outside {MIN_LEVEL}..{MAX_LEVEL}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Clamped to {clamped}.")
        logger.warning(msg)
        return Level(clamped)
    try:
        return parse_level(value)
    except ValueError as e:
        _reject(f"Invalid field 'level': {e}.", warnings, strict, ValueError)
        return Level.DEBUG


def _as_non_negative_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    if value is None:
        return fallback
    if isinstance(value, bool):
        _reject(f"Invalid field '{field}': expected int, received bool.", warnings, strict)
        return fallback
    if isinstance(value, str) and not strict:
        s = value.strip()
        if s.isdigit():
            warnings.append(f"Field '{field}' converted from str '{value}' to int.")
            return int(s)
    if isinstance(value, int):
        if value < 0:
            _reject(f"Invalid field '{field}': {value} is negative.", warnings, strict, ValueError)
            return fallback
        return value
    _reject(f"Invalid field '{field}': expected int, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_non_negative_float(value: Any, fallback: float, field: str, warnings: List[str], strict: bool) -> float:
    if value is None:
        return fallback
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if value < 0:
            _reject(f"Invalid field '{field}': {value} is negative.", warnings, strict, ValueError)
            return fallback
        return float(value)
    _reject(f"Invalid field '{field}': expected number, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from str '{value}' to bool True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from str '{value}' to bool False.")
                return False

    _reject(f"Invalid field '{field}': expected bool, received {type(value).__name__}.", warnings, strict)
    return fallback

from __future__ import annotations

"""
Record Formatting Service.

Builds the textual form of a log record:

    <YYYY.MM.DD_HH:MM:SS> <file:line>\t<TAG> <message>

The message is produced by printf-style interpolation that never raises.
A verb that does not match its argument, a missing argument or a surplus
argument is rendered as a visible marker inside the line instead of
propagating an exception to the code that is trying to log.
"""

import json
import logging
import re
import time
from dataclasses import dataclass
from numbers import Real
from typing import Any, Callable, List, Optional, Sequence, Tuple

from systemlog.core.caller import CallerResolver
from systemlog.domain.levels import TAGS, Level, colorize

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y.%m.%d_%H:%M:%S"

# Blank stand-in for a missing location, roughly the width of "module.py:123"
LOCATION_PAD = " " * 14

_VERB_RE = re.compile(r"%([-+ #0]*)(\d+)?(?:\.(\d+))?([a-zA-Z%])?")

_INT_VERBS = frozenset("dixXo")
_FLOAT_VERBS = frozenset("fFeEgG")


# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LogLine:
    """
    A formatted record, ready to be printed or persisted.

    Attributes:
        timestamp: Local time text at second resolution.
        location: Caller location or blank padding.
        tag: Severity tag, empty for untagged output.
        message: Interpolated message body.
    """
    timestamp: str
    location: str
    tag: str
    message: str

    def render(self, color: bool = False) -> str:
        prefix = f"{self.timestamp} {self.location}\t"
        if not self.tag:
            return prefix + self.message
        tag = colorize(self.tag) if color else self.tag
        return f"{prefix}{tag} {self.message}"

    def __str__(self) -> str:
        return self.render()


# -----------------------------------------------------------------------------
# FORMATTER
# -----------------------------------------------------------------------------

class Formatter:
    """
    Turns (tag, template, args) into a LogLine.

    Args:
        resolver: Source of caller locations; None disables locations.
        clock: Callable returning the current epoch time.
        info_location: Include the location on INFO records.
    """

    def __init__(
            self,
            resolver: Optional[CallerResolver] = None,
            clock: Callable[[], float] = time.time,
            info_location: bool = True,
    ) -> None:
        self._resolver = resolver
        self._clock = clock
        self._info_location = info_location

    def format(self, tag: str, template: Any, *args: Any) -> str:
        """Return the plain (uncoloured) text of a record."""
        return self.compose(tag, template, args).render()

    def compose(self, tag: str, template: Any, args: Sequence[Any] = ()) -> LogLine:
        """
        Build a LogLine from a tag, a template and its arguments.

        When the template is a callable, its qualified name is appended to
        the tag and the first argument becomes the template.
        """
        if callable(template) and not isinstance(template, str):
            tag = f"{tag}:{callable_name(template)}" if tag else callable_name(template)
            if args:
                template, args = args[0], args[1:]
            else:
                template = ""

        return LogLine(
            timestamp=self.timestamp(),
            location=self._location(tag),
            tag=tag,
            message=interpolate(template, args),
        )

    def timestamp(self) -> str:
        return time.strftime(TIMESTAMP_FORMAT, time.localtime(self._clock()))

    def _location(self, tag: str) -> str:
        if self._resolver is None:
            return LOCATION_PAD
        if not self._info_location and tag.split(":", 1)[0] == TAGS[Level.INFO]:
            return LOCATION_PAD
        site = self._resolver.resolve()
        return str(site) if site is not None else LOCATION_PAD


# -----------------------------------------------------------------------------
# PRINTF-STYLE INTERPOLATION
# -----------------------------------------------------------------------------

def sprintf(template: Any, *args: Any) -> str:
    """Interpolate positional arguments into a printf-style template."""
    return interpolate(template, args)


def interpolate(template: Any, args: Sequence[Any]) -> str:
    """
    Substitute arguments into a template, degrading instead of raising.

    Args:
        template: Format string; any other object is rendered with str().
        args: Positional substitution values.

    Returns:
        str: The rendered message, possibly containing error markers.
    """
    if not isinstance(template, str):
        return _display(template) + _extra_marker(list(args))

    out: List[str] = []
    remaining = list(args)
    pos = 0
    for match in _VERB_RE.finditer(template):
        out.append(template[pos:match.start()])
        pos = match.end()

        flags, width, precision, verb = match.groups()
        if verb == "%":
            out.append("%")
            continue
        if verb is None:
            out.append("%!(NOVERB)")
            continue
        if not remaining:
            out.append(f"%!{verb}(MISSING)")
            continue
        out.append(_convert(verb, flags, width, precision, remaining.pop(0)))

    out.append(template[pos:])
    return "".join(out) + _extra_marker(remaining)


def callable_name(fn: Any) -> str:
    """Return the qualified 'module.name' of a callable."""
    name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or type(fn).__qualname__
    module = getattr(fn, "__module__", None)
    return f"{module}.{name}" if module else name


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _convert(verb: str, flags: str, width: Optional[str], precision: Optional[str], value: Any) -> str:
    """Render one verb, returning a mismatch marker if the value does not fit."""
    try:
        if verb in _INT_VERBS:
            if isinstance(value, bool) or not isinstance(value, int):
                return _bad_verb(verb, value)
            return _spec(flags, width, precision, "d" if verb == "i" else verb) % value

        if verb in _FLOAT_VERBS:
            if isinstance(value, bool) or not isinstance(value, Real):
                return _bad_verb(verb, value)
            return _spec(flags, width, precision, verb) % float(value)

        if verb == "c":
            if isinstance(value, bool) or not isinstance(value, (int, str)):
                return _bad_verb(verb, value)
            return _spec(flags, width, None, "c") % value

        if verb == "t":
            if not isinstance(value, bool):
                return _bad_verb(verb, value)
            text = "true" if value else "false"
        elif verb == "q":
            if not isinstance(value, str):
                return _bad_verb(verb, value)
            text = json.dumps(value, ensure_ascii=False)
        elif verb == "r":
            text = _safe_repr(value)
        elif verb in ("s", "v"):
            text = _display(value)
        else:
            return _bad_verb(verb, value)

        return _spec(flags.replace("#", "").replace("+", "").replace(" ", "").replace("0", ""),
                     width, precision, "s") % text
    except (TypeError, ValueError, OverflowError):
        return _bad_verb(verb, value)


def _spec(flags: str, width: Optional[str], precision: Optional[str], verb: str) -> str:
    spec = "%" + flags
    if width:
        spec += width
    if precision is not None:
        spec += "." + precision
    return spec + verb


def _display(value: Any) -> str:
    try:
        return str(value)
    except Exception as e:
        logger.debug(f"str() failed for {type(value).__name__}: {e}")
        return f"%!v(PANIC={type(e).__name__})"


def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception as e:
        logger.debug(f"repr() failed for {type(value).__name__}: {e}")
        return f"%!r(PANIC={type(e).__name__})"


def _type_value(value: Any) -> Tuple[str, str]:
    return type(value).__name__, _display(value)


def _bad_verb(verb: str, value: Any) -> str:
    type_name, text = _type_value(value)
    return f"%!{verb}({type_name}={text})"


def _extra_marker(extra: List[Any]) -> str:
    if not extra:
        return ""
    parts = ", ".join("{}={}".format(*_type_value(v)) for v in extra)
    return f"%!(EXTRA {parts})"

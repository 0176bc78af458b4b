from __future__ import annotations

"""
Caller Resolution.

Locates the source file and line of the code that invoked a logging call,
skipping every frame that belongs to the logger's own package. The package
identity is derived once from the resolver's own frame, so the resolver
keeps working if the package is renamed or vendored under another name.
"""

import os
import sys
import threading
from types import FrameType
from typing import NamedTuple, Optional

# Frames between resolve() and the public logging method that are always internal
_DEFAULT_SKIP = 2
_DEFAULT_MAX_DEPTH = 32


class CallSite(NamedTuple):
    """Source location of a logging call."""
    file: str
    line: int

    def __str__(self) -> str:
        return f"{os.path.basename(self.file)}:{self.line}"


class CallerResolver:
    """
    Resolve the first stack frame outside the logger package.

    Safe to share between threads: the only mutable state is the namespace,
    computed once under a lock on first use and read-only afterwards.
    """

    def __init__(self, skip: int = _DEFAULT_SKIP, max_depth: int = _DEFAULT_MAX_DEPTH) -> None:
        self._skip = max(0, skip)
        self._max_depth = max(1, max_depth)
        self._namespace: Optional[str] = None
        self._init_lock = threading.Lock()

    @property
    def namespace(self) -> str:
        """Top-level package name treated as logger-internal."""
        if self._namespace is None:
            with self._init_lock:
                if self._namespace is None:
                    self._namespace = self._detect_namespace(sys._getframe(0))
        return self._namespace

    def resolve(self) -> Optional[CallSite]:
        """
        Return the call site of the current logging call.

        Returns:
            Optional[CallSite]: Location of the first external frame, or None
                                if none is found within the lookback bound.
        """
        namespace = self.namespace
        try:
            frame: Optional[FrameType] = sys._getframe(self._skip)
        except ValueError:
            return None

        depth = 0
        while frame is not None and depth < self._max_depth:
            if not self._is_internal(frame, namespace):
                return CallSite(frame.f_code.co_filename, frame.f_lineno)
            frame = frame.f_back
            depth += 1
        return None

    # -------------------------------------------------------------------------
    # Private Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _detect_namespace(frame: FrameType) -> str:
        module = frame.f_globals.get("__name__", "")
        return module.split(".", 1)[0]

    @staticmethod
    def _is_internal(frame: FrameType, namespace: str) -> bool:
        module = frame.f_globals.get("__name__", "")
        return module == namespace or module.startswith(namespace + ".")

from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides directory normalisation and the retrying removal primitive used
by stale-file cleanup and archiving. Acts as an abstraction over the 'os'
module so that transient failures (a file briefly held open by another
process) are handled in one place.
"""

import logging
import os
import time
from typing import Optional

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_directory(path: Optional[str]) -> str:
    """
    Normalize a directory string so that it always ends with a separator.

    An empty value resolves to the current directory. User home shortcuts
    (~/) and environment variables ($VAR/%VAR%) are expanded.

    Args:
        path: Raw directory string.

    Returns:
        str: Directory path terminated by os.sep.
    """
    p = (path or "").strip()
    if not p:
        return "." + os.sep
    p = os.path.expandvars(os.path.expanduser(p))
    if not p.endswith(os.sep) and not (os.altsep and p.endswith(os.altsep)):
        p += os.sep
    return p


def ensure_parent_dir(path: str) -> None:
    """
    Create the parent directory hierarchy of a file if it is missing.

    Args:
        path: Path to the target file.
    """
    parent = os.path.dirname(os.path.abspath(path))
    if parent and not os.path.isdir(parent):
        os.makedirs(parent, exist_ok=True)


def file_size(path: str) -> int:
    """Return the size of a file in bytes, or 0 if it does not exist."""
    try:
        return os.path.getsize(path)
    except FileNotFoundError:
        return 0

# -----------------------------------------------------------------------------
# REMOVAL API
# -----------------------------------------------------------------------------

def remove_with_retry(path: str, retries: int, delay: float) -> None:
    """
    Delete a file, retrying a bounded number of times on failure.

    A missing file counts as success, so the operation is idempotent.

    Args:
        path: File to remove.
        retries: Additional attempts after the first failure.
        delay: Seconds to sleep between attempts.

    Raises:
        OSError: The last error once every attempt has failed.
    """
    attempts_left = max(0, int(retries))
    while True:
        try:
            os.remove(path)
            return
        except FileNotFoundError:
            return
        except OSError as e:
            if attempts_left <= 0:
                raise
            attempts_left -= 1
            logger.debug(f"Removal of '{path}' failed ({e}); retries left: {attempts_left}")
            time.sleep(delay)

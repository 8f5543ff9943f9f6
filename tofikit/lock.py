"""Single-instance check using an exclusive lock on a file."""

from __future__ import annotations

import fcntl
import logging
import os
from pathlib import Path

log = logging.getLogger(__name__)

_DEFAULT_CACHE_DIR = ".cache"
_LOCK_FILENAME = "tofi.lock"

# Descriptors whose locks must stay held for the life of the process.
_held: list[int] = []


def lock_path() -> Path | None:
    """Location of the lock file, or None if HOME is needed but unset."""
    runtime = os.environ.get("XDG_RUNTIME_DIR")
    if runtime is None:
        runtime = os.environ.get("XDG_CACHE_HOME")
    if runtime is not None:
        return Path(runtime) / _LOCK_FILENAME
    home = os.environ.get("HOME")
    if home is None:
        log.error("Couldn't retrieve HOME from environment.")
        return None
    return Path(home) / _DEFAULT_CACHE_DIR / _LOCK_FILENAME


def lock_check(path: str | os.PathLike[str] | None = None) -> bool:
    """Take the lock and return whether another holder already had it.

    On success the lock is kept until the process exits. Failure to open the
    lock file is logged and reported as not locked.
    """
    if path is None:
        path = lock_path()
        if path is None:
            return False
    try:
        fd = os.open(path, os.O_RDONLY | os.O_CREAT, 0o600)
    except OSError as exc:
        log.error("Failed to open lock file %s: %s.", path, exc.strerror)
        return False
    try:
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except BlockingIOError:
        os.close(fd)
        return True
    except OSError:
        os.close(fd)
        return False
    _held.append(fd)
    return False
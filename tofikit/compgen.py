"""List the executables found on PATH, with an on-disk cache."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from tofikit.entry import ScoredEntry, find_sorted
from tofikit.history import History

log = logging.getLogger(__name__)

_DEFAULT_CACHE_DIR = ".cache"
_CACHE_BASENAME = "tofi-compgen"


def cache_path() -> Path | None:
    """Location of the command cache, or None if HOME is needed but unset."""
    cache = os.environ.get("XDG_CACHE_HOME")
    if cache is not None:
        return Path(cache) / _CACHE_BASENAME
    home = os.environ.get("HOME")
    if home is None:
        log.error("Couldn't retrieve HOME from environment.")
        return None
    return Path(home) / _DEFAULT_CACHE_DIR / _CACHE_BASENAME


def _path_entries() -> list[str]:
    env_path = os.environ.get("PATH")
    if env_path is None:
        raise RuntimeError("Couldn't retrieve PATH from environment.")
    return [entry for entry in env_path.split(":") if entry]


def _executables(directory: str) -> list[str]:
    try:
        entries = list(os.scandir(directory))
    except OSError:
        return []
    found = []
    for entry in entries:
        try:
            mode = os.stat(entry.path).st_mode
        except OSError:
            continue
        if mode & stat.S_IXUSR and stat.S_ISREG(mode):
            found.append(entry.name)
    return found


def compgen() -> str:
    """Every executable regular file on PATH, sorted and unique, one per line.

    Raises RuntimeError if PATH is not set.
    """
    names: set[str] = set()
    log.debug("Scanning PATH for binaries.")
    for directory in _path_entries():
        names.update(_executables(directory))
    return "".join(f"{name}\n" for name in sorted(names))


def _write_cache(commands: str, path: Path) -> None:
    try:
        path.write_text(commands, encoding="utf-8", errors="surrogateescape")
    except OSError as exc:
        log.error('Error writing cache file "%s": %s', path, exc.strerror)


def _read_cache(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8", errors="surrogateescape")
    except OSError as exc:
        log.error('Failed to read cache file "%s": %s', path, exc.strerror)
        return None


def _seconds(st: os.stat_result) -> int:
    return st.st_mtime_ns // 1_000_000_000


def compgen_cached() -> str:
    """Like ``compgen``, but reuse the cache unless a PATH directory is newer."""
    path_entries = _path_entries()
    cache = cache_path()
    if cache is None:
        return compgen()

    try:
        cache_stat = os.stat(cache)
    except FileNotFoundError:
        commands = compgen()
        try:
            cache.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            log.error("Failed to create directory %s: %s", cache.parent, exc.strerror)
        else:
            _write_cache(commands, cache)
        return commands
    except OSError:
        return compgen()

    out_of_date = False
    for entry in path_entries:
        try:
            entry_stat = os.stat(entry)
        except OSError:
            continue
        if _seconds(entry_stat) > _seconds(cache_stat):
            out_of_date = True
            break

    if out_of_date:
        log.debug("Cache out of date, updating.")
        commands = compgen()
        _write_cache(commands, cache)
        return commands

    log.debug("Cache up to date, loading.")
    cached = _read_cache(cache)
    return cached if cached is not None else compgen()


def compgen_history_sort(
    programs: list[ScoredEntry], history: History
) -> list[ScoredEntry]:
    """Return the programs with those found in ``history`` moved to the front.

    ``programs`` must be sorted by name. Their history scores are set from the
    run counts; known programs come first, most run first, and the rest keep
    their order.
    """
    for program in history:
        found = find_sorted(programs, program.name)
        if found is None:
            log.debug('History entry "%s" not found.', program.name)
            continue
        found.history_score = program.run_count

    known = [scored for scored in reversed(programs) if scored.history_score != 0]
    rest = [scored for scored in programs if scored.history_score == 0]
    known.sort(key=lambda scored: -scored.history_score)
    return known + rest
"""Find installed applications and build their command lines."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

from tofikit.desktop_vec import (
    DESKTOP_GROUP,
    DesktopList,
    _get_bool,
    _get_locale_string,
    _unescape,
    read_desktop_file,
)
from tofikit.history import History

log = logging.getLogger(__name__)

_DEFAULT_DATA_DIR = ".local/share/"
_DEFAULT_DATA_DIRS = "/usr/local/share/:/usr/share/"
_APPLICATIONS_SUBDIR = "applications/"
_DESKTOP_EXTENSION = ".desktop"


def application_paths() -> list[str]:
    """Application directories in order of precedence, highest first.

    Raises RuntimeError if neither XDG_DATA_HOME nor HOME is set.
    """
    data_dirs = os.environ.get("XDG_DATA_DIRS")
    if data_dirs is None:
        data_dirs = _DEFAULT_DATA_DIRS
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home is None:
        home = os.environ.get("HOME")
        if home is None:
            raise RuntimeError("Couldn't retrieve HOME from environment.")
        base_paths = f"{home}/{_DEFAULT_DATA_DIR}:{data_dirs}"
    else:
        base_paths = f"{data_home}:{data_dirs}"
    return [
        f"{entry}/{_APPLICATIONS_SUBDIR}" for entry in base_paths.split(":") if entry
    ]


def _walk(directory: str, relative: str, ancestors: frozenset) -> Iterator[str]:
    """Yield paths relative to the root of desktop files, following symlinks."""
    try:
        st = os.stat(directory)
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    except OSError:
        return
    key = (st.st_dev, st.st_ino)
    if key in ancestors:
        return
    ancestors = ancestors | {key}
    for entry in entries:
        rel = f"{relative}{entry.name}"
        try:
            is_dir = entry.is_dir(follow_symlinks=True)
        except OSError:
            is_dir = False
        if is_dir:
            yield from _walk(entry.path, f"{rel}/", ancestors)
        elif entry.name.endswith(_DESKTOP_EXTENSION):
            yield rel


def drun_generate() -> DesktopList:
    """Read every visible application, sorted by name.

    Only the highest precedence file with a given desktop ID is used.
    """
    files: dict[str, str] = {}
    for root in application_paths():
        base = root if root.endswith("/") else f"{root}/"
        for rel in _walk(root, "", frozenset()):
            desktop_id = rel.replace("/", "-")
            files.setdefault(desktop_id, base + rel)

    apps = DesktopList()
    for desktop_id, path in files.items():
        apps.add_file(desktop_id, path)
    log.debug("Found %d apps.", len(apps))
    apps.sort()
    return apps


def command_line(filename: str, terminal_command: str) -> str:
    """Build the command line of a desktop file with field codes expanded.

    Raises OSError if the file cannot be read and ValueError if it is
    malformed or has no usable Exec key.
    """
    group = read_desktop_file(filename).get(DESKTOP_GROUP, {})
    raw_exec = group.get("Exec")
    if raw_exec is None:
        raise ValueError(f"Failed to get Exec key from {filename}.")
    exec_line = _unescape(raw_exec)

    pieces: list[str] = []
    last = 0
    while (search := exec_line.find("%", last)) >= 0:
        pieces.append(exec_line[last:search])
        code = exec_line[search + 1:search + 2]
        if code == "i":
            if "Icon" in group:
                pieces.append("--icon ")
                pieces.append(_unescape(group["Icon"]))
        elif code == "c":
            pieces.append(_get_locale_string(group, "Name") or "")
        elif code == "k":
            pieces.append(filename)
        last = search + 2
    pieces.append(exec_line[last:])

    prefix = ""
    if _get_bool(group, "Terminal"):
        if not terminal_command:
            log.warning("Terminal application launched, but no terminal is set.")
            log.warning("This probably isn't what you want.")
            log.warning("See the --terminal option documentation.")
        else:
            prefix = f"{terminal_command} "
    return prefix + "".join(pieces)


def drun_print(filename: str, terminal_command: str) -> None:
    """Print the command line of a desktop file, logging any failure."""
    try:
        line = command_line(filename, terminal_command)
    except OSError:
        log.error("Failed to open %s.", filename)
        return
    except ValueError as exc:
        log.error("%s", exc)
        return
    print(line)


def drun_history_sort(apps: DesktopList, history: History) -> None:
    """Set run counts from ``history`` and put the most run applications first.

    ``apps`` must be sorted by name.
    """
    for program in history:
        app = apps.find_sorted(program.name)
        if app is not None:
            app.history_score = program.run_count
    apps.entries.sort(key=lambda app: -app.history_score)
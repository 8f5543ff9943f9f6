"""Run counts of previously launched programs, kept most-used first."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

log = logging.getLogger(__name__)

MAX_HISTFILE_SIZE = 10 * 1024 * 1024

_DEFAULT_STATE_DIR = ".local/state"
_HISTFILE_BASENAME = "tofi-history"
_DRUN_HISTFILE_BASENAME = "tofi-drun-history"

_LEADING_COUNT = re.compile(r"\s*\+?([0-9]+)")


def default_path(drun: bool) -> Path | None:
    """Location of the history file, or None if HOME is needed but unset."""
    basename = _DRUN_HISTFILE_BASENAME if drun else _HISTFILE_BASENAME
    state = os.environ.get("XDG_STATE_HOME")
    if state is not None:
        return Path(state) / basename
    home = os.environ.get("HOME")
    if home is None:
        log.error("Couldn't retrieve HOME from environment.")
        return None
    return Path(home) / _DEFAULT_STATE_DIR / basename


def _next_token(text: str, pos: int, delims: str) -> tuple[str | None, int]:
    """Return the next token delimited by ``delims`` and the position after it."""
    length = len(text)
    while pos < length and text[pos] in delims:
        pos += 1
    if pos >= length:
        return None, length
    end = pos
    while end < length and text[end] not in delims:
        end += 1
    return text[pos:end], min(end + 1, length)


def _parse_count(token: str) -> int:
    match = _LEADING_COUNT.match(token)
    return int(match.group(1)) if match else 0


def _records(text: str) -> Iterator[tuple[str, int]]:
    pos = 0
    while True:
        count_token, pos = _next_token(text, pos, " ")
        if count_token is None:
            return
        name, pos = _next_token(text, pos, "\n")
        if name is None:
            return
        yield name, _parse_count(count_token)


@dataclass
class Program:
    name: str
    run_count: int = 1


@dataclass
class History:
    programs: list[Program] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.programs)

    def __iter__(self) -> Iterator[Program]:
        return iter(self.programs)

    def add(self, name: str) -> None:
        """Count one more run of ``name``, moving it up past lower counts."""
        for index, program in enumerate(self.programs):
            if program.name == name:
                program.run_count += 1
                target = index
                while target > 0 and program.run_count > self.programs[target - 1].run_count:
                    target -= 1
                if target != index:
                    self.programs.insert(target, self.programs.pop(index))
                return
        self.programs.append(Program(name, 1))

    def remove(self, name: str) -> None:
        """Forget ``name`` if present."""
        for index, program in enumerate(self.programs):
            if program.name == name:
                del self.programs[index]
                return

    @classmethod
    def load(cls, path: str | os.PathLike[str]) -> History:
        """Read a history file; a missing or unreadable file gives an empty history."""
        history = cls()
        try:
            with open(path, "rb") as histfile:
                size = histfile.seek(0, os.SEEK_END)
                if size > MAX_HISTFILE_SIZE:
                    log.error(
                        "History file too big (> %d MiB)! Are you sure it's a file?",
                        MAX_HISTFILE_SIZE // 1024 // 1024,
                    )
                    return history
                histfile.seek(0)
                data = histfile.read()
        except OSError as exc:
            log.debug("Could not read history file %s: %s", path, exc)
            return history

        text = data.decode("utf-8", errors="surrogateescape")
        for name, count in _records(text):
            history.add(name)
            history.programs[-1].run_count = count
        return history

    def save(self, path: str | os.PathLike[str]) -> None:
        """Write the history, creating parent directories and a private file."""
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape") as histfile:
                for program in self.programs:
                    histfile.write(f"{program.run_count} {program.name}\n")
        except OSError as exc:
            log.error("Failed to save history file %s: %s", target, exc)

    @classmethod
    def load_default(cls, drun: bool) -> History:
        path = default_path(drun)
        if path is None:
            return cls()
        return cls.load(path)

    def save_default(self, drun: bool) -> None:
        path = default_path(drun)
        if path is not None:
            self.save(path)
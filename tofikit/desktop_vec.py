"""Applications read from desktop entry files."""

from __future__ import annotations

import logging
import os
import unicodedata
from bisect import bisect_left
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from tofikit.entry import Entry, ScoredEntry, sort_by_score
from tofikit.fuzzy_match import fuzzy_match_simple_words, fuzzy_match_words
from tofikit.icon import Icon

log = logging.getLogger(__name__)

DESKTOP_GROUP = "Desktop Entry"

# Keyword matches rank below name matches by this much.
_KEYWORD_PENALTY = 20

_LOCALE_ENV = ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG")
_ESCAPES = {"s": " ", "n": "\n", "t": "\t", "r": "\r", "\\": "\\", ";": ";"}

_TERRITORY = 1 << 1
_CODESET = 1 << 0
_MODIFIER = 1 << 2


def read_desktop_file(path: str | os.PathLike[str]) -> dict[str, dict[str, str]]:
    """Read a key file into groups of raw, still escaped, values.

    Raises OSError if the file cannot be read and ValueError if it is malformed.
    """
    text = Path(path).read_text(encoding="utf-8")
    groups: dict[str, dict[str, str]] = {}
    current: dict[str, str] | None = None
    for lineno, raw_line in enumerate(text.splitlines(), 1):
        line = raw_line.lstrip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("["):
            if not line.rstrip().endswith("]"):
                raise ValueError(f"{path}:{lineno}: malformed group header")
            current = groups.setdefault(line.rstrip()[1:-1], {})
            continue
        key, sep, value = line.partition("=")
        if not sep or current is None:
            raise ValueError(f"{path}:{lineno}: not a group or key-value pair")
        current[key.rstrip()] = value.lstrip()
    return groups


def _unescape(raw: str) -> str:
    out: list[str] = []
    chars = iter(raw)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, None)
        if nxt is None:
            raise ValueError(f"value {raw!r} ends in an escape character")
        if nxt not in _ESCAPES:
            raise ValueError(f"invalid escape sequence '\\{nxt}' in {raw!r}")
        out.append(_ESCAPES[nxt])
    return "".join(out)


def _split_list(raw: str) -> list[str]:
    pieces: list[str] = []
    current: list[str] = []
    chars = iter(raw)
    for ch in chars:
        if ch == "\\":
            current.append(ch)
            current.append(next(chars, ""))
        elif ch == ";":
            pieces.append("".join(current))
            current = []
        else:
            current.append(ch)
    if current:
        pieces.append("".join(current))
    return [_unescape(piece) for piece in pieces]


def _locale_variants(locale: str) -> list[str]:
    rest, _, modifier = locale.partition("@")
    rest, _, codeset = rest.partition(".")
    language, _, territory = rest.partition("_")
    mask = (
        (_TERRITORY if territory else 0)
        | (_CODESET if codeset else 0)
        | (_MODIFIER if modifier else 0)
    )
    variants = []
    for bits in range(mask, -1, -1):
        if bits & ~mask:
            continue
        name = language
        if bits & _TERRITORY:
            name += "_" + territory
        if bits & _CODESET:
            name += "." + codeset
        if bits & _MODIFIER:
            name += "@" + modifier
        variants.append(name)
    return variants


def _language_names() -> list[str]:
    value = next((os.environ[var] for var in _LOCALE_ENV if os.environ.get(var)), "C")
    names: list[str] = []
    for locale in value.split(":"):
        if not locale or locale in ("C", "POSIX"):
            continue
        for variant in _locale_variants(locale):
            if variant not in names:
                names.append(variant)
    return names


def _get_locale_string(group: dict[str, str], key: str) -> str | None:
    for language in _language_names():
        raw = group.get(f"{key}[{language}]")
        if raw is not None:
            try:
                return _unescape(raw)
            except ValueError:
                continue
    raw = group.get(key)
    if raw is None:
        return None
    try:
        return _unescape(raw)
    except ValueError:
        return None


def _get_bool(group: dict[str, str], key: str) -> bool:
    return group.get(key, "").strip() in ("true", "1")


def _get_list(group: dict[str, str], key: str) -> list[str] | None:
    raw = group.get(key)
    if raw is None:
        return None
    try:
        return _split_list(raw)
    except ValueError:
        return None


def match_current_desktop(desktops: Iterable[str]) -> bool:
    """Whether any of ``desktops`` is named in XDG_CURRENT_DESKTOP."""
    current = os.environ.get("XDG_CURRENT_DESKTOP")
    if current is None:
        return False
    names = {name for name in current.split(":") if name}
    return any(desktop in names for desktop in desktops)


@dataclass
class DesktopEntry:
    id: str
    name: str
    icon: Icon
    path: str
    keywords: str = ""
    comment: str | None = None
    search_score: int = 0
    history_score: int = 0


@dataclass
class DesktopList:
    """Applications found in desktop entry files."""

    entries: list[DesktopEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[DesktopEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> DesktopEntry:
        return self.entries[index]

    def add(
        self, id: str, name: str, icon: str | None, path: str, keywords: str
    ) -> DesktopEntry:
        """Append an application, normalising its name and resolving its icon."""
        entry = DesktopEntry(
            id=id,
            name=unicodedata.normalize("NFD", name),
            icon=Icon.from_text(icon),
            path=str(path),
            keywords=keywords,
        )
        self.entries.append(entry)
        return entry

    def add_file(self, id: str, path: str | os.PathLike[str]) -> DesktopEntry | None:
        """Add the application described by a desktop file, if it should be shown."""
        try:
            groups = read_desktop_file(path)
        except (OSError, ValueError):
            log.error("Failed to open %s.", path)
            return None

        group = groups.get(DESKTOP_GROUP, {})
        if _get_bool(group, "Hidden") or _get_bool(group, "NoDisplay"):
            return None

        name = _get_locale_string(group, "Name")
        if name is None:
            log.error("%s: No name found.", path)
            return None
        icon = _get_locale_string(group, "Icon")
        # A list in the file, but matched against as a single string.
        keywords = _get_locale_string(group, "Keywords") or ""

        only_show_in = _get_list(group, "OnlyShowIn")
        if only_show_in is not None and not match_current_desktop(only_show_in):
            return None
        not_show_in = _get_list(group, "NotShowIn")
        if not_show_in is not None and match_current_desktop(not_show_in):
            return None

        return self.add(id, name, icon, str(path), keywords)

    def sort(self) -> None:
        """Sort applications by name."""
        self.entries.sort(key=lambda entry: entry.name)

    def find_sorted(self, name: str) -> DesktopEntry | None:
        """Binary search for an application by name in a sorted list."""
        index = bisect_left(self.entries, name, key=lambda entry: entry.name)
        if index < len(self.entries) and self.entries[index].name == name:
            return self.entries[index]
        return None

    def filter(self, substr: str, fuzzy: bool) -> list[ScoredEntry]:
        """Applications whose name, or failing that keywords, match; best first."""
        matcher = fuzzy_match_words if fuzzy else fuzzy_match_simple_words
        found: list[ScoredEntry] = []
        for app in self.entries:
            score = matcher(substr, app.name)
            if score is None:
                score = matcher(substr, app.keywords)
                if score is None:
                    continue
                score -= _KEYWORD_PENALTY
            entry = Entry(name=app.name, icon=app.icon, comment=app.comment)
            found.append(ScoredEntry(entry, score, app.history_score))
        sort_by_score(found)
        return found
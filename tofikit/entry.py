"""Launcher entries with search and history scores, and their filtering."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable
from dataclasses import dataclass, field

from tofikit.fuzzy_match import fuzzy_match_simple_words, fuzzy_match_words
from tofikit.history import History
from tofikit.icon import Icon


@dataclass
class Entry:
    """Something shown in the result list."""

    name: str | None
    icon: Icon | None = None
    comment: str | None = None
    classes: tuple[str, ...] = field(default_factory=tuple)


@dataclass
class ScoredEntry:
    """An entry together with how well it matched and how often it was run."""

    entry: Entry
    search_score: int = 0
    history_score: int = 0

    @property
    def total_score(self) -> int:
        return self.search_score + self.history_score


def _name_key(name: str | None) -> tuple[bool, str]:
    # Entries without a name sort after every named entry.
    return (name is None, name or "")


def sort_by_score(entries: list[ScoredEntry]) -> None:
    """Order best first by the sum of history and search scores."""
    entries.sort(key=lambda scored: -scored.total_score)


def filter_entries(
    entries: Iterable[ScoredEntry], substr: str, fuzzy: bool
) -> list[ScoredEntry]:
    """Keep the entries whose names match ``substr``, best match first.

    An empty ``substr`` keeps every entry with its scores unchanged.
    """
    if not substr:
        return [
            ScoredEntry(scored.entry, scored.search_score, scored.history_score)
            for scored in entries
        ]
    matcher = fuzzy_match_words if fuzzy else fuzzy_match_simple_words
    found: list[ScoredEntry] = []
    for scored in entries:
        score = matcher(substr, scored.entry.name or "")
        if score is not None:
            found.append(ScoredEntry(scored.entry, score, scored.history_score))
    sort_by_score(found)
    return found


def history_sort(entries: list[ScoredEntry], history: History) -> None:
    """Give entries the run counts recorded in ``history`` and put the most run first."""
    by_name = {
        scored.entry.name: scored for scored in entries if scored.entry.name is not None
    }
    for program in history:
        scored = by_name.get(program.name)
        if scored is not None:
            scored.history_score = program.run_count
    entries.sort(key=lambda scored: -scored.history_score)


def find_sorted(entries: list[ScoredEntry], name: str) -> ScoredEntry | None:
    """Binary search a list sorted by entry name, unnamed entries last."""
    index = bisect_left(
        entries, _name_key(name), key=lambda scored: _name_key(scored.entry.name)
    )
    if index < len(entries) and entries[index].entry.name == name:
        return entries[index]
    return None
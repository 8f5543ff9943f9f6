"""Fuzzy and plain substring matching of search patterns against strings.

Scores are integers where higher is better. ``None`` means "no match".
"""

from __future__ import annotations

import unicodedata

_ADJACENCY_BONUS = 15
_SEPARATOR_BONUS = 30
_CAMEL_BONUS = 30
_FIRST_LETTER_BONUS = 15
_LEADING_LETTER_PENALTY = -5
_MAX_LEADING_LETTER_PENALTY = -15
_UNMATCHED_LETTER_PENALTY = -1

# Beyond this length only the first fuzzy match is scored, not the best one,
# since the number of candidate matches grows combinatorially.
_FIRST_MATCH_ONLY_LENGTH = 100


def _normalize(text: str) -> str:
    return unicodedata.normalize("NFD", text)


def _fold(ch: str) -> str:
    """Lower-case a single character, keeping it a single character."""
    lower = ch.lower()
    return lower if len(lower) == 1 else ch


def _fold_all(text: str) -> str:
    return "".join(map(_fold, text))


def _words(patterns: str) -> list[str]:
    return [word for word in _normalize(patterns).split(" ") if word]


def fuzzy_match_simple_words(patterns: str, string: str) -> int | None:
    """Match each space-separated word as a case-insensitive substring.

    The score is the negated sum of the offsets at which the words were found,
    so matches nearer the start score higher. Returns None if any word is
    missing.
    """
    folded = _fold_all(string)
    score = 0
    for word in _words(patterns):
        offset = folded.find(_fold_all(word))
        if offset < 0:
            return None
        score -= offset
    return score


def fuzzy_match_words(patterns: str, string: str) -> int | None:
    """Sum of ``fuzzy_match`` over each space-separated word, or None."""
    score = 0
    for word in _words(patterns):
        word_score = fuzzy_match(word, string)
        if word_score is None:
            return None
        score += word_score
    return score


def fuzzy_match(pattern: str, string: str) -> int | None:
    """Score ``string`` if every character of ``pattern`` occurs in order.

    Matching is case-insensitive. Returns None if there is no such match.
    """
    if not pattern:
        return 0
    if len(string) < len(pattern):
        return None

    score = _UNMATCHED_LETTER_PENALTY * (len(string) - len(pattern))
    first_match_only = len(string) > _FIRST_MATCH_ONLY_LENGTH
    folded_pattern = _fold_all(pattern)
    folded_string = _fold_all(string)

    def recurse(p: int, s: int, score: int, first_char: bool) -> int | None:
        if p == len(folded_pattern):
            return score
        search = folded_pattern[p]
        best: int | None = None
        match = folded_string.find(search, s)
        while match >= 0:
            subscore = recurse(
                p + 1,
                match + 1,
                _compute_score(match - s, first_char, string, match),
                False,
            )
            if subscore is not None and (best is None or subscore > best):
                best = subscore
            if first_match_only:
                break
            match = folded_string.find(search, match + 1)
        if best is None:
            return None
        return score + best

    return recurse(0, 0, score, True)


def _compute_score(jump: int, first_char: bool, string: str, match: int) -> int:
    """Score a single matched character at ``string[match]``."""
    score = 0
    cur = string[match]

    if not first_char and jump == 0:
        score += _ADJACENCY_BONUS
    if not first_char or jump > 0:
        prev = string[match - 1]
        if cur.isupper() and prev.islower():
            score += _CAMEL_BONUS
        if cur.isalnum() and not prev.isalnum():
            score += _SEPARATOR_BONUS
    if first_char and jump == 0:
        score += _FIRST_LETTER_BONUS

    if first_char:
        score += max(_LEADING_LETTER_PENALTY * jump, _MAX_LEADING_LETTER_PENALTY)

    return score
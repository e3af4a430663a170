"""Fuzzy matching for the project picker.

Scoring favours matches at the start of the name, after a separator or at a
camelCase boundary, and runs of adjacent characters. Unmatched leading and
trailing characters cost a little.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sesh.models.projects import Project

FIRST_CHAR_BONUS = 10
SEPARATOR_BONUS = 20
CAMEL_BONUS = 20
ADJACENT_BONUS = 5
LEADING_PENALTY = -5
MAX_LEADING_PENALTY = -15
UNMATCHED_PENALTY = -1

_SEPARATORS = frozenset("/-_ .\\")


@dataclass(frozen=True, slots=True)
class Match:
    """A candidate that contains every query character in order."""

    index: int
    score: int
    positions: tuple[int, ...]


def fuzzy_match(query: str, candidate: str, index: int = 0) -> Match | None:
    """Match ``query`` as a case-insensitive subsequence of ``candidate``."""
    if not query:
        return Match(index, 0, ())

    lowered = candidate.lower()
    positions: list[int] = []
    score = 0
    cursor = 0
    for char in query.lower():
        found = lowered.find(char, cursor)
        if found < 0:
            return None
        score += _position_bonus(candidate, found, positions[-1] if positions else None)
        positions.append(found)
        cursor = found + 1

    score += max(LEADING_PENALTY * positions[0], MAX_LEADING_PENALTY)
    score += UNMATCHED_PENALTY * (len(candidate) - len(positions))
    return Match(index, score, tuple(positions))


def _position_bonus(candidate: str, position: int, previous: int | None) -> int:
    if position == 0:
        bonus = FIRST_CHAR_BONUS
    else:
        before = candidate[position - 1]
        current = candidate[position]
        bonus = 0
        if before in _SEPARATORS:
            bonus += SEPARATOR_BONUS
        elif before.islower() and current.isupper():
            bonus += CAMEL_BONUS
    if previous is not None and previous == position - 1:
        bonus += ADJACENT_BONUS
    return bonus


def fuzzy_find(query: str, candidates: Sequence[str]) -> list[Match]:
    """Return matching candidates, best score first, ties in input order."""
    matches = [
        match
        for index, candidate in enumerate(candidates)
        if (match := fuzzy_match(query, candidate, index)) is not None
    ]
    matches.sort(key=lambda m: (-m.score, m.index))
    return matches


def fuzzy_filter(query: str, projects: Sequence[Project]) -> list[Project]:
    """Filter projects by name.

    An empty query keeps the given (frecency) order; otherwise matches are
    ordered by relevance alone.
    """
    query = query.strip()
    if not query:
        return list(projects)
    return [projects[m.index] for m in fuzzy_find(query, [p.name for p in projects])]

"""
gh_activity/metrics/ranking.py — Bounded top-N selection.

One primitive serves every report: score each candidate, keep at most n of
them in a working list, and return that list ordered best-first.

Algorithm (bounded top-N, not a full sort):
    1. While the working list holds fewer than n entries, append.
       The list is sorted descending the moment it fills up.
    2. Afterwards, compare each candidate with the last (worst) kept entry.
       If the candidate ranks strictly ahead of it, evict the worst entry,
       insert the candidate and re-sort the working list.
    3. Sort once more at the end so populations smaller than n come back
       ordered too.

Cost is O(k · n log n) for k candidates; report widths are small (10 by
default).

Ordering and ties:
    Entries are ordered by (score, tie_break) descending. With no tie_break
    only the score counts. Candidates that tie the worst kept entry do not
    evict it, and Python's sort is stable, so entries that tie under the full
    ordering stay in iteration order: the first one seen ranks first. No
    stronger guarantee is made.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RankedEntry(Generic[T]):
    """
    One kept candidate.

    Fields:
        item:      The ranked object (Repo, Actor, ...).
        score:     Primary score.
        tie_break: Secondary score, or None when the ranking has no tie-break.
    """

    item: T
    score: int
    tie_break: Optional[int] = None

    @property
    def key(self) -> tuple[int, int]:
        return (self.score, self.tie_break if self.tie_break is not None else 0)


def _sort_descending(entries: list[RankedEntry]) -> None:
    entries.sort(key=lambda e: e.key, reverse=True)


def top_n(
    items: Iterable[T],
    score: Callable[[T], int],
    n: int,
    tie_break: Optional[Callable[[T], int]] = None,
) -> list[RankedEntry[T]]:
    """
    Return the n highest-ranked items, best first.

    Args:
        items:     Candidate population (any finite iterable).
        score:     Primary score function, higher is better.
        n:         Result width, n >= 0.
        tie_break: Optional secondary score, consulted only when primary
                   scores are equal; higher is better.

    Returns:
        min(n, len(items)) RankedEntry objects ordered by (score, tie_break)
        descending.

    Raises:
        ValueError: n is negative.
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    if n == 0:
        return []

    kept: list[RankedEntry[T]] = []
    for item in items:
        entry = RankedEntry(
            item=item,
            score=score(item),
            tie_break=tie_break(item) if tie_break is not None else None,
        )
        if len(kept) < n:
            kept.append(entry)
            if len(kept) == n:
                _sort_descending(kept)
        elif entry.key > kept[-1].key:
            kept[-1] = entry
            _sort_descending(kept)

    _sort_descending(kept)
    return kept


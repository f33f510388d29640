"""
Rank calculation.

Entries are ordered by score descending; entries sharing a score are ordered
by the players' display names (case-sensitive, ordinal). Ranks are 1-based.

``entries`` may be any objects with ``player_id`` and ``score`` attributes, so
both ORM rows and cached snapshots can be ranked. Name lookups go through an
injected resolver exposing ``get_display_name(player_id) -> str``.
"""

from collections import Counter
from typing import Iterable, List, Protocol


class NameResolver(Protocol):
    def get_display_name(self, player_id: str) -> str:
        ...


def compute_rank(entry, entries: Iterable, resolver: NameResolver) -> int:
    """Return the 1-based rank of ``entry`` among ``entries`` of its leaderboard.

    Names are only resolved when another player shares the entry's score. A
    name that cannot be resolved fails the whole calculation.
    """
    better = 0
    tied = []
    for other in entries:
        if other.score > entry.score:
            better += 1
        elif other.score == entry.score and other.player_id != entry.player_id:
            tied.append(other)

    if not tied:
        return better + 1

    own_name = resolver.get_display_name(entry.player_id)
    tied_names = [resolver.get_display_name(other.player_id) for other in tied]
    return better + sum(1 for name in tied_names if name < own_name) + 1


def sort_by_rank(entries: Iterable, resolver: NameResolver) -> List:
    """Return ``entries`` in rank order, best first.

    Players with identical display names keep their input order.
    """
    entries = list(entries)
    per_score = Counter(e.score for e in entries)

    def order(e):
        name = resolver.get_display_name(e.player_id) if per_score[e.score] > 1 else ""
        return (-e.score, name)

    return sorted(entries, key=order)

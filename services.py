"""
Leaderboard orchestration: score store + rank calculation + cache.

Write paths mutate the store first and then invalidate the cache keys the
change could have made stale:

  * updating or deleting an entry drops both of its per-entry snapshots;
  * any submit/delete whose rank lands inside the top-N window drops the
    leaderboard's cached top list (for deletes, the rank before deletion).

Read paths are cache-first. Single-entry reads always recompute rank against
the store because rank depends on every other entry; cached snapshots never
carry one. Top-N reads return the cached list as-is.
"""

import logging
from typing import List, Optional

import pydantic

from auth import Actor, require_actor, require_admin
from cache import ENTRY_TTL, TOP_TTL, TTL, entry_key, player_entry_key, top_key
from errors import ForbiddenError, NotFoundError
from models import (
    Leaderboard,
    LeaderboardEntry,
    validate_bounds,
    validate_num_of_top_scores,
    validate_score,
)
from ranking import NameResolver, compute_rank, sort_by_rank
from schemas import EntrySnapshot, EntryView, LeaderboardCreate, LeaderboardUpdate, TopSnapshot
from store import ScoreStore

logger = logging.getLogger(__name__)


class LeaderboardEntryService:
    def __init__(
        self,
        store: ScoreStore,
        cache,
        resolver: NameResolver,
        entry_ttl: TTL = ENTRY_TTL,
        top_ttl: TTL = TOP_TTL,
    ):
        self.store = store
        self.cache = cache
        self.resolver = resolver
        self.entry_ttl = entry_ttl
        self.top_ttl = top_ttl

    # ── Writes ───────────────────────────────────────────────────

    def submit(self, actor: Optional[Actor], leaderboard_id: int, score: int) -> int:
        """Create the actor's entry or overwrite its score; returns the entry id."""
        actor = require_actor(actor)

        leaderboard = self.store.get_leaderboard(leaderboard_id)
        if leaderboard is None:
            raise NotFoundError(f"Leaderboard {leaderboard_id} not found")
        validate_score(score, leaderboard)

        entry = self.store.get_entry_by_player(leaderboard_id, actor.player_id)
        if entry is None:
            entry = LeaderboardEntry(leaderboard=leaderboard, player_id=actor.player_id, score=score)
            self.store.add_entry(entry)
        else:
            entry.score = score
            self.store.update_entry(entry)
            self._invalidate_entry(entry.id, entry.leaderboard_id, entry.player_id)

        rank = self.rank_of(entry)
        if rank <= leaderboard.num_of_top_scores:
            self.cache.delete(top_key(leaderboard_id))

        logger.info("Score %d submitted by %s to leaderboard %d (entry=%d, rank=%d)",
                    score, actor.player_id, leaderboard_id, entry.id, rank)
        return entry.id

    def delete(self, actor: Optional[Actor], entry_id: int) -> None:
        """Delete an entry; only its owner or an admin may do so."""
        actor = require_actor(actor)

        entry = self.store.get_entry_by_id(entry_id)
        if entry is None:
            raise NotFoundError(f"Entry {entry_id} not found")
        if not (actor.owns(entry) or actor.is_admin):
            raise ForbiddenError("Players can only delete their own entries")

        leaderboard_id, player_id = entry.leaderboard_id, entry.player_id
        was_in_top = self.rank_of(entry) <= entry.leaderboard.num_of_top_scores

        self.store.delete_entry(entry)

        self._invalidate_entry(entry_id, leaderboard_id, player_id)
        if was_in_top:
            self.cache.delete(top_key(leaderboard_id))

        logger.info("Entry %d deleted by %s", entry_id, actor.player_id)

    def _invalidate_entry(self, entry_id: int, leaderboard_id: int, player_id: str) -> None:
        self.cache.delete(entry_key(entry_id), player_entry_key(leaderboard_id, player_id))

    # ── Reads ────────────────────────────────────────────────────

    def get_by_id(self, entry_id: int) -> EntryView:
        key = entry_key(entry_id)
        view = self._cached_view(key)
        if view is not None:
            return view

        entry = self.store.get_entry_by_id(entry_id)
        if entry is None:
            raise NotFoundError(f"Entry {entry_id} not found")
        return self._cache_and_view(key, entry)

    def get_by_player(self, player_id: str, leaderboard_id: int) -> EntryView:
        key = player_entry_key(leaderboard_id, player_id)
        view = self._cached_view(key)
        if view is not None:
            return view

        entry = self.store.get_entry_by_player(leaderboard_id, player_id)
        if entry is None:
            raise NotFoundError(f"No entry for player {player_id} in leaderboard {leaderboard_id}")
        return self._cache_and_view(key, entry)

    def get_top_n(self, leaderboard: Leaderboard) -> List[EntrySnapshot]:
        """Best ``num_of_top_scores`` entries, ordered the same way as ranks."""
        key = top_key(leaderboard.id)
        cached = self.cache.get(key)
        if cached is not None:
            try:
                return TopSnapshot.validate_json(cached)
            except pydantic.ValidationError:
                logger.warning("Discarding unreadable cache value for %s", key)

        snapshots = [EntrySnapshot.model_validate(e) for e in self._load_top(leaderboard)]
        self.cache.set(key, TopSnapshot.dump_json(snapshots).decode(), self.top_ttl)
        return snapshots

    def get_rank(self, leaderboard_id: int, player_id: str) -> int:
        entry = self.store.get_entry_by_player(leaderboard_id, player_id)
        if entry is None:
            raise NotFoundError(f"No entry for player {player_id} in leaderboard {leaderboard_id}")
        return self.rank_of(entry)

    def rank_of(self, entry) -> int:
        return compute_rank(entry, self.store.list_entries(entry.leaderboard_id), self.resolver)

    def _load_top(self, leaderboard: Leaderboard) -> List[LeaderboardEntry]:
        top = self.store.get_top_n(leaderboard)
        if not top:
            return []
        # Players tied at the cutoff score may be cut in storage order, so the
        # whole tie group is fetched and re-ordered by display name.
        cutoff = top[-1].score
        candidates = [e for e in top if e.score > cutoff]
        candidates += self.store.get_entries_with_score(leaderboard.id, cutoff)
        return sort_by_rank(candidates, self.resolver)[:leaderboard.num_of_top_scores]

    def _cached_view(self, key: str) -> Optional[EntryView]:
        cached = self.cache.get(key)
        if cached is None:
            logger.debug("Cache miss: %s", key)
            return None
        try:
            snapshot = EntrySnapshot.model_validate_json(cached)
        except pydantic.ValidationError:
            logger.warning("Discarding unreadable cache value for %s", key)
            self.cache.delete(key)
            return None

        logger.debug("Cache hit: %s", key)
        if self.store.get_leaderboard(snapshot.leaderboard_id) is None:
            raise NotFoundError(f"Leaderboard {snapshot.leaderboard_id} not found")
        return EntryView(**snapshot.model_dump(), rank=self.rank_of(snapshot))

    def _cache_and_view(self, key: str, entry: LeaderboardEntry) -> EntryView:
        snapshot = EntrySnapshot.model_validate(entry)
        self.cache.set(key, snapshot.model_dump_json(), self.entry_ttl)
        return EntryView(**snapshot.model_dump(), rank=self.rank_of(entry))


class LeaderboardService:
    """Administrative leaderboard CRUD."""

    def __init__(self, store: ScoreStore, cache):
        self.store = store
        self.cache = cache

    def get(self, leaderboard_id: int) -> Leaderboard:
        leaderboard = self.store.get_leaderboard(leaderboard_id)
        if leaderboard is None:
            raise NotFoundError(f"Leaderboard {leaderboard_id} not found")
        return leaderboard

    def get_info(self, actor: Optional[Actor], leaderboard_id: int) -> Leaderboard:
        require_admin(actor)
        return self.get(leaderboard_id)

    def get_all(self, actor: Optional[Actor]) -> List[Leaderboard]:
        require_admin(actor)
        return self.store.get_all_leaderboards()

    def add(self, actor: Optional[Actor], data: LeaderboardCreate) -> Leaderboard:
        require_admin(actor)
        leaderboard = Leaderboard(
            name=data.name,
            min_score=data.min_score,
            max_score=data.max_score,
            num_of_top_scores=data.num_of_top_scores,
        )
        self.store.add_leaderboard(leaderboard)
        logger.info("Leaderboard %d (%s) created", leaderboard.id, leaderboard.name)
        return leaderboard

    def update(self, actor: Optional[Actor], leaderboard_id: int, data: LeaderboardUpdate) -> Leaderboard:
        require_admin(actor)
        leaderboard = self.get(leaderboard_id)

        min_score = leaderboard.min_score if data.min_score is None else data.min_score
        max_score = leaderboard.max_score if data.max_score is None else data.max_score
        validate_bounds(min_score, max_score)
        if data.num_of_top_scores is not None:
            validate_num_of_top_scores(data.num_of_top_scores)

        if data.name is not None:
            leaderboard.name = data.name
        leaderboard.set_bounds(min_score, max_score)
        if data.num_of_top_scores is not None:
            leaderboard.num_of_top_scores = data.num_of_top_scores
        self.store.update_leaderboard(leaderboard)

        # The size or bounds of the top view may have changed.
        self.cache.delete(top_key(leaderboard_id))
        logger.info("Leaderboard %d updated", leaderboard_id)
        return leaderboard

    def delete(self, actor: Optional[Actor], leaderboard_id: int) -> None:
        require_admin(actor)
        leaderboard = self.get(leaderboard_id)
        entry_keys = []
        for entry in leaderboard.entries:
            entry_keys += [entry_key(entry.id), player_entry_key(leaderboard_id, entry.player_id)]

        self.store.delete_leaderboard(leaderboard)

        self.cache.delete(top_key(leaderboard_id), *entry_keys)
        logger.info("Leaderboard %d deleted (%d entries)", leaderboard_id, len(entry_keys) // 2)

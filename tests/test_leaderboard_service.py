"""
Tests for leaderboard administration.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.orm.exc import StaleDataError

from cache import entry_key, player_entry_key, top_key
from errors import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from models import MAX_SCORE, Leaderboard
from schemas import LeaderboardCreate, LeaderboardUpdate
from store import ScoreStore


class TestAdd:
    def test_admin_creates_leaderboard(self, leaderboard_service, players, admin):
        created = leaderboard_service.add(admin, LeaderboardCreate(name="Weekly", num_of_top_scores=5))

        stored = leaderboard_service.get(created.id)
        assert (stored.name, stored.min_score, stored.max_score, stored.num_of_top_scores) == (
            "Weekly", 0, MAX_SCORE, 5
        )

    def test_player_is_forbidden(self, leaderboard_service, players, actor_a):
        with pytest.raises(ForbiddenError):
            leaderboard_service.add(actor_a, LeaderboardCreate(name="Weekly", num_of_top_scores=5))

    def test_anonymous_is_unauthorized(self, leaderboard_service, players):
        with pytest.raises(UnauthorizedError):
            leaderboard_service.add(None, LeaderboardCreate(name="Weekly", num_of_top_scores=5))

    @pytest.mark.parametrize("fields", [
        {"min_score": 100, "max_score": 100, "num_of_top_scores": 5},
        {"min_score": 100, "max_score": 10, "num_of_top_scores": 5},
        {"num_of_top_scores": 0},
    ])
    def test_invalid_leaderboard(self, leaderboard_service, store, players, admin, fields):
        with pytest.raises(ValidationError):
            leaderboard_service.add(admin, LeaderboardCreate(name="Broken", **fields))

        assert store.get_all_leaderboards() == []


class TestRead:
    def test_get_missing(self, leaderboard_service, players):
        with pytest.raises(NotFoundError):
            leaderboard_service.get(42)

    def test_get_info_requires_admin(self, leaderboard_service, leaderboard, actor_a, admin):
        with pytest.raises(ForbiddenError):
            leaderboard_service.get_info(actor_a, leaderboard.id)

        assert leaderboard_service.get_info(admin, leaderboard.id).name == "Main"

    def test_get_all(self, leaderboard_service, leaderboard, admin):
        leaderboard_service.add(admin, LeaderboardCreate(name="Second", num_of_top_scores=3))

        assert [lb.name for lb in leaderboard_service.get_all(admin)] == ["Main", "Second"]


class TestUpdate:
    def test_updates_fields_and_drops_top_list(
        self, leaderboard_service, entry_service, cache, leaderboard, admin, actor_a
    ):
        entry_service.submit(actor_a, leaderboard.id, 100)
        entry_service.get_top_n(leaderboard)
        assert top_key(leaderboard.id) in cache

        updated = leaderboard_service.update(
            admin, leaderboard.id, LeaderboardUpdate(name="Renamed", num_of_top_scores=7)
        )

        assert (updated.name, updated.num_of_top_scores) == ("Renamed", 7)
        assert (updated.min_score, updated.max_score) == (10, 1000)
        assert top_key(leaderboard.id) not in cache

    def test_moves_bounds_past_each_other(self, leaderboard_service, leaderboard, admin):
        updated = leaderboard_service.update(
            admin, leaderboard.id, LeaderboardUpdate(min_score=2000, max_score=3000)
        )
        assert (updated.min_score, updated.max_score) == (2000, 3000)

    def test_single_bound_checked_against_current(self, leaderboard_service, leaderboard, admin):
        with pytest.raises(ValidationError):
            leaderboard_service.update(admin, leaderboard.id, LeaderboardUpdate(min_score=1000))

    def test_invalid_update_changes_nothing(self, leaderboard_service, db, leaderboard, admin):
        with pytest.raises(ValidationError):
            leaderboard_service.update(
                admin, leaderboard.id, LeaderboardUpdate(name="Renamed", num_of_top_scores=0)
            )

        db.expire_all()
        assert leaderboard_service.get(leaderboard.id).name == "Main"

    def test_requires_admin(self, leaderboard_service, leaderboard, actor_a):
        with pytest.raises(ForbiddenError):
            leaderboard_service.update(actor_a, leaderboard.id, LeaderboardUpdate(name="Mine"))

    def test_missing(self, leaderboard_service, players, admin):
        with pytest.raises(NotFoundError):
            leaderboard_service.update(admin, 42, LeaderboardUpdate(name="Ghost"))


class TestDelete:
    def test_cascades_entries_and_cache(
        self, leaderboard_service, entry_service, store, cache, leaderboard, admin, actor_a
    ):
        leaderboard_id = leaderboard.id
        entry_id = entry_service.submit(actor_a, leaderboard_id, 100)
        entry_service.get_by_id(entry_id)
        entry_service.get_by_player("a", leaderboard_id)
        entry_service.get_top_n(leaderboard)

        leaderboard_service.delete(admin, leaderboard_id)

        assert store.get_leaderboard(leaderboard_id) is None
        assert store.get_entry_by_id(entry_id) is None
        assert top_key(leaderboard_id) not in cache
        assert entry_key(entry_id) not in cache
        assert player_entry_key(leaderboard_id, "a") not in cache

    def test_requires_admin(self, leaderboard_service, leaderboard, actor_a):
        with pytest.raises(ForbiddenError):
            leaderboard_service.delete(actor_a, leaderboard.id)

    def test_missing(self, leaderboard_service, players, admin):
        with pytest.raises(NotFoundError):
            leaderboard_service.delete(admin, 42)


def test_concurrent_update_conflict_maps_to_not_found():
    db = MagicMock()
    db.commit.side_effect = StaleDataError("version mismatch")

    with pytest.raises(NotFoundError):
        ScoreStore(db).update_leaderboard(Leaderboard(name="Test", num_of_top_scores=1))

    db.rollback.assert_called_once()

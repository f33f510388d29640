"""
Score store: persistence of leaderboards and their entries.

Thin repository over a SQLAlchemy session. Optimistic-concurrency conflicts
(a row changed or removed between read and write) surface as NotFoundError.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from errors import NotFoundError
from models import Leaderboard, LeaderboardEntry

logger = logging.getLogger(__name__)


class ScoreStore:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            logger.info("Concurrent update detected; treating row as missing")
            raise NotFoundError("The record was changed or removed concurrently") from None
        except SQLAlchemyError:
            self.db.rollback()
            raise

    # ── Entries ──────────────────────────────────────────────────

    def add_entry(self, entry: LeaderboardEntry) -> LeaderboardEntry:
        self.db.add(entry)
        self._commit()
        return entry

    def update_entry(self, entry: LeaderboardEntry) -> LeaderboardEntry:
        self.db.add(entry)
        self._commit()
        return entry

    def delete_entry(self, entry: LeaderboardEntry) -> None:
        self.db.delete(entry)
        self._commit()

    def get_entry_by_id(self, entry_id: int) -> Optional[LeaderboardEntry]:
        return self.db.get(LeaderboardEntry, entry_id)

    def get_entry_by_player(self, leaderboard_id: int, player_id: str) -> Optional[LeaderboardEntry]:
        return self.db.execute(
            select(LeaderboardEntry)
            .where(LeaderboardEntry.leaderboard_id == leaderboard_id)
            .where(LeaderboardEntry.player_id == player_id)
        ).scalars().first()

    def list_entries(self, leaderboard_id: int) -> List[LeaderboardEntry]:
        return list(self.db.execute(
            select(LeaderboardEntry)
            .where(LeaderboardEntry.leaderboard_id == leaderboard_id)
            .order_by(LeaderboardEntry.id)
        ).scalars())

    def get_entries_with_score(self, leaderboard_id: int, score: int) -> List[LeaderboardEntry]:
        return list(self.db.execute(
            select(LeaderboardEntry)
            .where(LeaderboardEntry.leaderboard_id == leaderboard_id)
            .where(LeaderboardEntry.score == score)
            .order_by(LeaderboardEntry.id)
        ).scalars())

    def get_top_n(self, leaderboard: Leaderboard) -> List[LeaderboardEntry]:
        """Best ``num_of_top_scores`` entries by score; equal scores in insertion order."""
        return list(self.db.execute(
            select(LeaderboardEntry)
            .where(LeaderboardEntry.leaderboard_id == leaderboard.id)
            .order_by(LeaderboardEntry.score.desc(), LeaderboardEntry.id)
            .limit(leaderboard.num_of_top_scores)
        ).scalars())

    # ── Leaderboards ─────────────────────────────────────────────

    def add_leaderboard(self, leaderboard: Leaderboard) -> Leaderboard:
        self.db.add(leaderboard)
        self._commit()
        return leaderboard

    def get_leaderboard(self, leaderboard_id: int) -> Optional[Leaderboard]:
        return self.db.get(Leaderboard, leaderboard_id)

    def get_all_leaderboards(self) -> List[Leaderboard]:
        return list(self.db.execute(select(Leaderboard).order_by(Leaderboard.id)).scalars())

    def update_leaderboard(self, leaderboard: Leaderboard) -> Leaderboard:
        self.db.add(leaderboard)
        self._commit()
        return leaderboard

    def delete_leaderboard(self, leaderboard: Leaderboard) -> None:
        self.db.delete(leaderboard)
        self._commit()

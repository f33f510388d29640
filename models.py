"""
SQLAlchemy ORM models for the Leaderboard service.
Tables: players, leaderboards, leaderboard_entries

Bounds and score invariants are checked on every attribute assignment,
not only at construction time.
"""

from sqlalchemy import (
    BigInteger, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, func
)
from sqlalchemy.orm import declarative_base, relationship, validates

from errors import ValidationError

Base = declarative_base()

MIN_SCORE = 0
MAX_SCORE = 2**63 - 1


# ── Invariant checks ─────────────────────────────────────────────

def validate_bounds(min_score: int, max_score: int) -> None:
    if min_score >= max_score:
        raise ValidationError(
            f"Min. score ({min_score}) must be less than max. score ({max_score})"
        )


def validate_num_of_top_scores(value: int) -> None:
    if value < 1:
        raise ValidationError("Number of top scores cannot be less than one")


def validate_score(score: int, leaderboard: "Leaderboard") -> None:
    if not leaderboard.min_score <= score <= leaderboard.max_score:
        raise ValidationError(
            f"Score {score} is outside the leaderboard bounds "
            f"[{leaderboard.min_score}, {leaderboard.max_score}]"
        )


# ── Models ───────────────────────────────────────────────────────

class Player(Base):
    """A registered player; ``username`` doubles as the tie-break display name."""

    __tablename__ = "players"

    id = Column(String(64), primary_key=True)
    username = Column(String(255), unique=True, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    join_date = Column(DateTime, server_default=func.now())

    # Relationships
    entries = relationship("LeaderboardEntry", back_populates="player", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Player(id='{self.id}', username='{self.username}')>"


class Leaderboard(Base):
    """A named scoring pool with inclusive score bounds and a top-N size."""

    __tablename__ = "leaderboards"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    min_score = Column(BigInteger, nullable=False, default=MIN_SCORE)
    max_score = Column(BigInteger, nullable=False, default=MAX_SCORE)
    num_of_top_scores = Column(Integer, nullable=False)
    version = Column(Integer, nullable=False)

    # Relationships
    entries = relationship("LeaderboardEntry", back_populates="leaderboard", cascade="all, delete-orphan")

    __mapper_args__ = {"version_id_col": version}

    def __init__(self, **kwargs):
        # Defaults are applied before validation so a single bound can be passed.
        kwargs.setdefault("min_score", MIN_SCORE)
        kwargs.setdefault("max_score", MAX_SCORE)
        super().__init__(**kwargs)

    @validates("min_score")
    def _check_min_score(self, key, value):
        if self.max_score is not None:
            validate_bounds(value, self.max_score)
        return value

    @validates("max_score")
    def _check_max_score(self, key, value):
        if self.min_score is not None:
            validate_bounds(self.min_score, value)
        return value

    @validates("num_of_top_scores")
    def _check_num_of_top_scores(self, key, value):
        validate_num_of_top_scores(value)
        return value

    def set_bounds(self, min_score: int, max_score: int) -> None:
        """Move both bounds at once, in whichever order keeps min < max valid."""
        validate_bounds(min_score, max_score)
        if self.max_score is not None and min_score >= self.max_score:
            self.max_score = max_score
            self.min_score = min_score
        else:
            self.min_score = min_score
            self.max_score = max_score

    def __repr__(self):
        return (
            f"<Leaderboard(id={self.id}, name='{self.name}', "
            f"bounds=[{self.min_score}, {self.max_score}], top={self.num_of_top_scores})>"
        )


class LeaderboardEntry(Base):
    """One player's current score within one leaderboard."""

    __tablename__ = "leaderboard_entries"
    __table_args__ = (
        Index("idx_entries_leaderboard_score", "leaderboard_id", "score"),
        Index("idx_entries_leaderboard_player", "leaderboard_id", "player_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    leaderboard_id = Column(Integer, ForeignKey("leaderboards.id", ondelete="CASCADE"), nullable=False)
    player_id = Column(String(64), ForeignKey("players.id", ondelete="CASCADE"), nullable=False)
    score = Column(BigInteger, nullable=False)
    version = Column(Integer, nullable=False)

    # Relationships
    leaderboard = relationship("Leaderboard", back_populates="entries")
    player = relationship("Player", back_populates="entries")

    __mapper_args__ = {"version_id_col": version}

    def __init__(self, leaderboard=None, **kwargs):
        # The owning leaderboard must be attached before the score is checked.
        if leaderboard is not None:
            self.leaderboard = leaderboard
        super().__init__(**kwargs)

    @validates("leaderboard_id")
    def _check_leaderboard_id(self, key, value):
        if self.leaderboard_id is not None and value != self.leaderboard_id:
            raise ValidationError("An entry cannot be moved to another leaderboard")
        return value

    @validates("leaderboard")
    def _check_leaderboard(self, key, value):
        if self.leaderboard is not None and value is not self.leaderboard:
            raise ValidationError("An entry cannot be moved to another leaderboard")
        return value

    @validates("score")
    def _check_score(self, key, value):
        if self.leaderboard is not None:
            validate_score(value, self.leaderboard)
        return value

    def __repr__(self):
        return (
            f"<LeaderboardEntry(id={self.id}, leaderboard_id={self.leaderboard_id}, "
            f"player_id='{self.player_id}', score={self.score})>"
        )

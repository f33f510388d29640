"""
Pydantic schemas for request validation, response serialization and the
JSON snapshots stored in the cache.
"""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from typing import Optional

from models import MAX_SCORE

MIN_STORABLE = -(2**63)


# ── Request Schemas ──────────────────────────────────────────────

class ScoreSubmission(BaseModel):
    """Request body for submitting a score."""

    leaderboard_id: int = Field(..., gt=0, description="ID of the leaderboard")
    score: int = Field(..., ge=MIN_STORABLE, le=MAX_SCORE, description="Score achieved")


class LeaderboardCreate(BaseModel):
    """Request body for creating a leaderboard."""

    name: str = Field(..., min_length=1, max_length=255)
    min_score: int = Field(default=0, ge=MIN_STORABLE, le=MAX_SCORE)
    max_score: int = Field(default=MAX_SCORE, ge=MIN_STORABLE, le=MAX_SCORE)
    num_of_top_scores: int = Field(..., description="Size of the cached top list")


class LeaderboardUpdate(BaseModel):
    """Request body for editing a leaderboard; omitted fields are kept."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    min_score: Optional[int] = Field(default=None, ge=MIN_STORABLE, le=MAX_SCORE)
    max_score: Optional[int] = Field(default=None, ge=MIN_STORABLE, le=MAX_SCORE)
    num_of_top_scores: Optional[int] = None


# ── Cache Snapshots ──────────────────────────────────────────────

class EntrySnapshot(BaseModel):
    """Stored fields of an entry, without rank."""

    model_config = ConfigDict(from_attributes=True)

    leaderboard_id: int
    player_id: str
    score: int


TopSnapshot = TypeAdapter(list[EntrySnapshot])


# ── Response Schemas ─────────────────────────────────────────────

class EntryView(EntrySnapshot):
    """An entry together with its live rank."""

    rank: Optional[int] = None


class SubmitResponse(BaseModel):
    """Response after successfully submitting a score."""

    message: str
    entry_id: int


class TopEntriesResponse(BaseModel):
    """Top entries of a leaderboard, best first."""

    leaderboard_id: int
    entries: list[EntrySnapshot]


class RankResponse(BaseModel):
    """Response for a player's rank lookup."""

    leaderboard_id: int
    player_id: str
    rank: int


class LeaderboardOut(BaseModel):
    """Leaderboard as returned to administrators."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    min_score: int
    max_score: int
    num_of_top_scores: int


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str

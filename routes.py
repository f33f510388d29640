"""
Leaderboard API routes.

Endpoints:
  GET    /api/leaderboards                               — List leaderboards (admin)
  POST   /api/leaderboards                               — Create a leaderboard (admin)
  GET    /api/leaderboards/{id}/info                     — Leaderboard details (admin)
  PUT    /api/leaderboards/{id}                          — Edit a leaderboard (admin)
  DELETE /api/leaderboards/{id}                          — Delete a leaderboard (admin)
  POST   /api/leaderboards/entries                       — Submit a score
  GET    /api/leaderboards/entries/{entry_id}            — Entry with live rank
  DELETE /api/leaderboards/entries/{entry_id}            — Delete an entry (owner or admin)
  GET    /api/leaderboards/{id}/entries/top              — Top N entries
  GET    /api/leaderboards/{id}/entries/{player_id}      — A player's entry with live rank
  GET    /api/leaderboards/{id}/ranks/{player_id}        — A player's rank
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from auth import Actor, get_current_actor
from cache import get_cache
from config import get_settings
from database import get_db
from limiter import limiter
from names import PlayerNameResolver
from schemas import (
    EntryView,
    LeaderboardCreate,
    LeaderboardOut,
    LeaderboardUpdate,
    RankResponse,
    ScoreSubmission,
    SubmitResponse,
    TopEntriesResponse,
)
from services import LeaderboardEntryService, LeaderboardService
from store import ScoreStore

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/api/leaderboards", tags=["Leaderboard"])


# ── Dependencies ─────────────────────────────────────────────────

def get_entry_service(db: Session = Depends(get_db), cache=Depends(get_cache)) -> LeaderboardEntryService:
    return LeaderboardEntryService(
        ScoreStore(db),
        cache,
        PlayerNameResolver(db),
        entry_ttl=settings.entry_cache_ttl_seconds,
        top_ttl=settings.top_cache_ttl_seconds,
    )


def get_leaderboard_service(db: Session = Depends(get_db), cache=Depends(get_cache)) -> LeaderboardService:
    return LeaderboardService(ScoreStore(db), cache)


# ── 1. Leaderboard administration ────────────────────────────────

@router.get("", response_model=list[LeaderboardOut])
@limiter.limit(settings.read_rate_limit)
def list_leaderboards(
    request: Request,
    actor: Optional[Actor] = Depends(get_current_actor),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    """Return every leaderboard."""
    return [LeaderboardOut.model_validate(lb) for lb in service.get_all(actor)]


@router.post("", response_model=LeaderboardOut, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.submit_rate_limit)
def create_leaderboard(
    request: Request,
    payload: LeaderboardCreate,
    actor: Optional[Actor] = Depends(get_current_actor),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    return LeaderboardOut.model_validate(service.add(actor, payload))


@router.get("/{leaderboard_id}/info", response_model=LeaderboardOut)
@limiter.limit(settings.read_rate_limit)
def get_leaderboard(
    request: Request,
    leaderboard_id: int,
    actor: Optional[Actor] = Depends(get_current_actor),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    return LeaderboardOut.model_validate(service.get_info(actor, leaderboard_id))


@router.put("/{leaderboard_id}", response_model=LeaderboardOut)
@limiter.limit(settings.submit_rate_limit)
def update_leaderboard(
    request: Request,
    leaderboard_id: int,
    payload: LeaderboardUpdate,
    actor: Optional[Actor] = Depends(get_current_actor),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    return LeaderboardOut.model_validate(service.update(actor, leaderboard_id, payload))


@router.delete("/{leaderboard_id}")
@limiter.limit(settings.submit_rate_limit)
def delete_leaderboard(
    request: Request,
    leaderboard_id: int,
    actor: Optional[Actor] = Depends(get_current_actor),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    service.delete(actor, leaderboard_id)
    return {"message": f"Leaderboard {leaderboard_id} deleted"}


# ── 2. Entries ───────────────────────────────────────────────────

@router.post("/entries", response_model=SubmitResponse)
@limiter.limit(settings.submit_rate_limit)
def submit_score(
    request: Request,
    payload: ScoreSubmission,
    actor: Optional[Actor] = Depends(get_current_actor),
    service: LeaderboardEntryService = Depends(get_entry_service),
):
    """
    Submit a score for the calling player.

    The first submission to a leaderboard creates the player's entry; later
    submissions overwrite its score and keep the entry id.
    """
    entry_id = service.submit(actor, payload.leaderboard_id, payload.score)
    return SubmitResponse(message="Score submitted successfully", entry_id=entry_id)


@router.get("/entries/{entry_id}", response_model=EntryView)
@limiter.limit(settings.read_rate_limit)
def get_entry(
    request: Request,
    entry_id: int,
    service: LeaderboardEntryService = Depends(get_entry_service),
):
    return service.get_by_id(entry_id)


@router.delete("/entries/{entry_id}")
@limiter.limit(settings.submit_rate_limit)
def delete_entry(
    request: Request,
    entry_id: int,
    actor: Optional[Actor] = Depends(get_current_actor),
    service: LeaderboardEntryService = Depends(get_entry_service),
):
    """Players may delete their own entries; admins may delete any."""
    service.delete(actor, entry_id)
    return {"message": f"Entry {entry_id} deleted"}


# ── 3. Top N and ranks ───────────────────────────────────────────

@router.get("/{leaderboard_id}/entries/top", response_model=TopEntriesResponse)
@limiter.limit(settings.read_rate_limit)
def get_top_entries(
    request: Request,
    leaderboard_id: int,
    leaderboards: LeaderboardService = Depends(get_leaderboard_service),
    service: LeaderboardEntryService = Depends(get_entry_service),
):
    """Return the leaderboard's top ``num_of_top_scores`` entries, best first."""
    leaderboard = leaderboards.get(leaderboard_id)
    return TopEntriesResponse(leaderboard_id=leaderboard_id, entries=service.get_top_n(leaderboard))


@router.get("/{leaderboard_id}/entries/{player_id}", response_model=EntryView)
@limiter.limit(settings.read_rate_limit)
def get_player_entry(
    request: Request,
    leaderboard_id: int,
    player_id: str,
    service: LeaderboardEntryService = Depends(get_entry_service),
):
    return service.get_by_player(player_id, leaderboard_id)


@router.get("/{leaderboard_id}/ranks/{player_id}", response_model=RankResponse)
@limiter.limit(settings.read_rate_limit)
def get_player_rank(
    request: Request,
    leaderboard_id: int,
    player_id: str,
    service: LeaderboardEntryService = Depends(get_entry_service),
):
    """Fetch a player's rank, recomputed against the current entries."""
    rank = service.get_rank(leaderboard_id, player_id)
    return RankResponse(leaderboard_id=leaderboard_id, player_id=player_id, rank=rank)

"""
Caller identity.

Authentication itself lives outside this service; requests carry the
authenticated player's id in the ``X-Player-Id`` header and roles come from
the ``players`` table.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from database import get_db
from errors import ForbiddenError, UnauthorizedError
from models import Player


@dataclass(frozen=True)
class Actor:
    player_id: str
    is_admin: bool = False

    def owns(self, entry) -> bool:
        return entry.player_id == self.player_id


def require_actor(actor: Optional[Actor]) -> Actor:
    if actor is None:
        raise UnauthorizedError()
    return actor


def require_admin(actor: Optional[Actor]) -> Actor:
    actor = require_actor(actor)
    if not actor.is_admin:
        raise ForbiddenError("Admin privileges are required")
    return actor


def get_current_actor(
    x_player_id: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> Optional[Actor]:
    """Resolve the caller, or None when the header is missing or unknown."""
    if not x_player_id:
        return None
    player = db.get(Player, x_player_id)
    if player is None:
        return None
    return Actor(player_id=player.id, is_admin=bool(player.is_admin))

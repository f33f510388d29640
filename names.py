"""
Display-name lookup used to break score ties.
"""

from typing import Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from errors import ResolutionError
from models import Player


class PlayerNameResolver:
    """Resolves display names from the ``players`` table."""

    def __init__(self, db: Session):
        self.db = db

    def get_display_name(self, player_id: str) -> str:
        name = self.db.execute(
            select(Player.username).where(Player.id == player_id)
        ).scalar_one_or_none()
        if name is None:
            raise ResolutionError(f"Unknown player {player_id}")
        return name


class StaticNameResolver:
    """Resolves display names from a fixed mapping."""

    def __init__(self, names: Mapping[str, str]):
        self.names = dict(names)

    def get_display_name(self, player_id: str) -> str:
        try:
            return self.names[player_id]
        except KeyError:
            raise ResolutionError(f"Unknown player {player_id}") from None

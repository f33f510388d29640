"""
Rate limiter configuration using SlowAPI.
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from config import get_settings


def player_or_remote_address(request: Request) -> str:
    """Limit authenticated callers per player and anonymous ones per IP."""
    player_id = request.headers.get("x-player-id")
    if player_id:
        return f"player:{player_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=player_or_remote_address, enabled=get_settings().rate_limit_enabled)

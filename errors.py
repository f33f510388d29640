"""
Error taxonomy for the Leaderboard service.

Every error carries the HTTP status the API layer answers with, so a single
exception handler in ``app.py`` can translate them.
"""

from typing import Optional


class LeaderboardServiceError(Exception):
    """Base class for all errors raised by the leaderboard core."""

    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(LeaderboardServiceError):
    """Leaderboard, entry or player does not exist."""

    status_code = 404
    default_detail = "Not found"


class UnauthorizedError(LeaderboardServiceError):
    """No resolvable caller identity."""

    status_code = 401
    default_detail = "Authentication required"


class ForbiddenError(LeaderboardServiceError):
    """The caller is known but has no rights over the target."""

    status_code = 403
    default_detail = "Not allowed"


class ValidationError(LeaderboardServiceError):
    """Score outside leaderboard bounds, or a leaderboard invariant violated."""

    status_code = 400
    default_detail = "Invalid value"


class ResolutionError(LeaderboardServiceError):
    """A tie-break participant's display name could not be resolved."""

    status_code = 500
    default_detail = "Could not resolve player name"

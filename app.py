"""
Leaderboard Service — FastAPI Application Entry Point.

Provides a leaderboard system with:
  - One entry per player per leaderboard, with bounded scores
  - Live ranks with deterministic tie-breaking by display name
  - Cached entry and top-N reads with targeted invalidation
  - Admin-managed leaderboards
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from config import get_settings
from database import check_connection, create_tables, engine
from errors import LeaderboardServiceError
from limiter import limiter
from routes import router as leaderboard_router

settings = get_settings()

# ── Logging ──────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s │ %(levelname)-7s │ %(name)s │ %(message)s",
)
logger = logging.getLogger(__name__)


# ── App Lifecycle ────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(application: FastAPI):
    """Startup / shutdown lifecycle handler."""
    # Startup
    check_connection()
    create_tables()

    yield  # ← app is running

    # Shutdown
    engine.dispose()
    logger.info("Database connections closed")


# ── FastAPI App ──────────────────────────────────────────────────

app = FastAPI(
    title=settings.app_name,
    description="Leaderboards with live ranks, cached top lists and targeted invalidation",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(LeaderboardServiceError)
async def leaderboard_error_handler(request: Request, exc: LeaderboardServiceError):
    """Translate domain errors into ``{"detail": ...}`` responses."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Register routes
app.include_router(leaderboard_router)


# ── Health Check ─────────────────────────────────────────────────

@app.get("/health", tags=["Health"])
def health_check():
    """Simple liveness probe."""
    return {"status": "ok", "service": "leaderboard"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="127.0.0.1", port=8000, reload=True)

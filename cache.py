"""
Cache layer for leaderboard reads.

Key layout:
  entry:<entryId>                  — entry snapshot (no rank), 1 day
  entry:<leaderboardId>:<playerId> — same snapshot, looked up by player, 1 day
  top:<leaderboardId>              — ordered top-N snapshot list, 30 minutes

The cache is an optimization only: every backend turns its own failures
into a miss (reads) or a no-op (writes) and logs a warning.
"""

import logging
import threading
import time
from datetime import timedelta
from functools import lru_cache
from typing import Optional, Union

import redis

from config import get_settings

logger = logging.getLogger(__name__)

ENTRY_TTL = timedelta(days=1)
TOP_TTL = timedelta(minutes=30)

TTL = Union[int, timedelta]


def entry_key(entry_id: int) -> str:
    return f"entry:{entry_id}"


def player_entry_key(leaderboard_id: int, player_id: str) -> str:
    return f"entry:{leaderboard_id}:{player_id}"


def top_key(leaderboard_id: int) -> str:
    return f"top:{leaderboard_id}"


def _seconds(ttl: TTL) -> int:
    if isinstance(ttl, timedelta):
        return int(ttl.total_seconds())
    return int(ttl)


# ── Redis backend (graceful fallback if unavailable) ─────────────

class RedisCache:
    """Redis-backed cache; runs as an always-miss cache while Redis is down."""

    def __init__(self, url: str):
        self.url = url
        self._client: Optional[redis.Redis] = None

    def _get_client(self) -> Optional[redis.Redis]:
        """Lazy-initialize and return the Redis client, or None if unavailable."""
        if self._client is not None:
            return self._client
        try:
            client = redis.Redis.from_url(self.url, decode_responses=True, socket_connect_timeout=1)
            client.ping()
        except redis.RedisError as e:
            logger.warning("⚠ Redis unavailable — running without cache (%s)", e)
            return None
        logger.info("✓ Redis connected — caching is enabled")
        self._client = client
        return client

    def get(self, key: str) -> Optional[str]:
        client = self._get_client()
        if client is None:
            return None
        try:
            return client.get(key)
        except redis.RedisError as e:
            logger.warning("Cache read failed for %s: %s", key, e)
            return None

    def set(self, key: str, value: str, ttl: TTL) -> None:
        client = self._get_client()
        if client is None:
            return
        try:
            client.setex(key, _seconds(ttl), value)
        except redis.RedisError as e:
            logger.warning("Cache write failed for %s: %s", key, e)

    def delete(self, *keys: str) -> None:
        client = self._get_client()
        if client is None or not keys:
            return
        try:
            client.delete(*keys)
        except redis.RedisError as e:
            logger.warning("Cache invalidation failed for %s: %s", ", ".join(keys), e)


# ── In-process backend ───────────────────────────────────────────

class MemoryCache:
    """Thread-safe in-process cache with per-key expiry."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._data: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            value, expires_at = item
            if self._clock() >= expires_at:
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: str, ttl: TTL) -> None:
        with self._lock:
            self._data[key] = (value, self._clock() + _seconds(ttl))

    def delete(self, *keys: str) -> None:
        with self._lock:
            for key in keys:
                self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._data)


@lru_cache
def get_cache():
    """Return the process-wide cache backend chosen by configuration."""
    settings = get_settings()
    if settings.redis_url:
        return RedisCache(settings.redis_url)
    logger.info("No Redis URL configured — using in-process cache")
    return MemoryCache()

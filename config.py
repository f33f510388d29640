"""
Runtime configuration for the Leaderboard service.

Values are read from environment variables prefixed with ``LEADERBOARD_``
(or a local ``.env`` file).
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LEADERBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Leaderboard API"
    database_url: str = "sqlite:///./leaderboard.db"
    redis_url: Optional[str] = None

    entry_cache_ttl_seconds: int = Field(default=60 * 60 * 24, gt=0)
    top_cache_ttl_seconds: int = Field(default=60 * 30, gt=0)

    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    rate_limit_enabled: bool = True
    submit_rate_limit: str = "5/minute"
    read_rate_limit: str = "60/minute"

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()

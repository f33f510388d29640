"""
Pytest fixtures for the Leaderboard service.

Unit and service tests run against an in-memory SQLite database and the
in-process cache; API tests reuse both through FastAPI dependency overrides.
"""

import os

# Must be set before the application modules read their settings.
os.environ.setdefault("LEADERBOARD_DATABASE_URL", "sqlite://")
os.environ.setdefault("LEADERBOARD_RATE_LIMIT_ENABLED", "false")
os.environ.pop("LEADERBOARD_REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from auth import Actor
from cache import MemoryCache, get_cache
from database import get_db
from models import Base, Leaderboard, Player
from names import PlayerNameResolver
from services import LeaderboardEntryService, LeaderboardService
from store import ScoreStore

PLAYERS = [
    ("a", "Zara", False),
    ("b", "Amir", False),
    ("c", "Carl", False),
    ("admin", "Root", True),
]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def players(db):
    db.add_all([Player(id=pid, username=name, is_admin=admin) for pid, name, admin in PLAYERS])
    db.commit()
    return {pid: pid for pid, _, _ in PLAYERS}


@pytest.fixture
def cache():
    return MemoryCache()


@pytest.fixture
def store(db):
    return ScoreStore(db)


@pytest.fixture
def entry_service(store, cache, db):
    return LeaderboardEntryService(store, cache, PlayerNameResolver(db))


@pytest.fixture
def leaderboard_service(store, cache):
    return LeaderboardService(store, cache)


@pytest.fixture
def leaderboard(db, players):
    leaderboard = Leaderboard(name="Main", min_score=10, max_score=1000, num_of_top_scores=2)
    db.add(leaderboard)
    db.commit()
    return leaderboard


@pytest.fixture
def actor_a():
    return Actor(player_id="a")


@pytest.fixture
def actor_b():
    return Actor(player_id="b")


@pytest.fixture
def actor_c():
    return Actor(player_id="c")


@pytest.fixture
def admin():
    return Actor(player_id="admin", is_admin=True)


@pytest.fixture
def client(session_factory, cache, players):
    from app import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()

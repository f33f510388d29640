"""
Database engine, session factory and the per-request session dependency.
"""

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

from config import get_settings
from models import Base

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_size": 20, "max_overflow": 10, "pool_pre_ping": True}


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(bind=None):
    """Create all tables and indexes if they don't already exist."""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("✓ Database tables ensured")


def check_connection(bind=None) -> bool:
    """Run a trivial query; returns False instead of raising when the DB is down."""
    try:
        with (bind or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("✗ Database connection failed: %s", e)
        return False
    logger.info("✓ Database connected successfully")
    return True


def get_db():
    """Yield a session for one unit of work and always close it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

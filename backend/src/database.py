"""Database session factory and configuration.

Provides database connectivity and session management for the document
service. The engine is created on first use so importing this module does
not require a database driver.
"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from config import get_settings
from models.base import Base

_engine: Optional[Engine] = None

# Create session factory (bound lazily in get_engine)
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first call."""
    global _engine
    if _engine is None:
        database_url = get_settings().DATABASE_URL

        # Pool settings only apply to PostgreSQL (not SQLite)
        engine_kwargs = {
            "pool_pre_ping": True,  # Verify connections before using
            "echo": False,
        }
        if not database_url.startswith("sqlite"):
            engine_kwargs["pool_size"] = 5
            engine_kwargs["max_overflow"] = 10

        _engine = create_engine(database_url, **engine_kwargs)
        SessionLocal.configure(bind=_engine)
    return _engine


def init_db() -> None:
    """Create missing tables for all registered models.

    Local development only; deployed databases are migrated with Alembic
    (backend/migrations).
    """
    import models  # noqa: F401  registers the mappers on Base.metadata

    Base.metadata.create_all(bind=get_engine())

# wealthvault/database.py
"""
Database connection and session management.

Configures SQLAlchemy for the holdings store:
- SQLite (default): StaticPool for in-memory test databases, plain file
  otherwise; check_same_thread disabled because debounced writes run on
  timer threads
- Anything else (e.g. PostgreSQL): default QueuePool with pre-ping
"""

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wealthvault.config import settings
from wealthvault.models import Base

logger = logging.getLogger(__name__)


def _create_engine() -> Engine:
    """Create the SQLAlchemy engine for the configured DATABASE_URL."""
    if settings.is_sqlite:
        logger.info("Configuring SQLite holdings store")
        pool_kwargs = {"poolclass": StaticPool} if ":memory:" in settings.database_url else {}
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            echo=settings.debug,
            **pool_kwargs,
        )

    logger.info("Configuring pooled holdings store")
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
        echo=settings.debug,
    )


engine = _create_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine | None = None) -> None:
    """Create all tables defined in models (idempotent)."""
    Base.metadata.create_all(bind=bind or engine)


def check_database_health() -> dict:
    """Check store connectivity. Used by the /health endpoint."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

        return {
            "status": "healthy",
            "database": "sqlite" if settings.is_sqlite else engine.dialect.name,
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "unhealthy",
            "error": str(e),
        }

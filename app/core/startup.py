"""
Application startup and shutdown logic for the leaderboard API.
"""
import logging
from sqlalchemy import text

from app.core.database import engine, Base, SessionLocal

logger = logging.getLogger(__name__)


def initialize_database() -> None:
    """Create tables, seed the game catalog and warm up the connection pool."""
    from app.core.catalog import seed_games
    from app.models import (  # noqa: F401  registers tables on Base
        achievement, friendship, game, password_reset_token, score, user, user_stats
    )

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

        with SessionLocal() as db:
            added = seed_games(db)
        if added:
            logger.info(f"Seeded {added} catalog games")

        # Warm up the connection pool
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection pool initialized")

    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def shutdown_database() -> None:
    """Clean up database connections."""
    try:
        engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error during database shutdown: {e}")
        # Don't re-raise during shutdown

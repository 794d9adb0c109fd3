"""
Database migration script to set up the schema and seed the game catalog.
"""
import os

from dotenv import load_dotenv

# Load environment variables before the engine is built from them
load_dotenv()

from app.core.catalog import seed_games  # noqa: E402
from app.core.database import SessionLocal, engine, init_db  # noqa: E402
from app.models import (  # noqa: E402,F401  registers tables on Base
    achievement, friendship, game, password_reset_token, score, user, user_stats
)


def run_migrations():
    """Create tables and indexes, then seed reference data."""
    init_db()

    with SessionLocal() as db:
        added = seed_games(db)

    print(f"Database migrations completed successfully ({added} games seeded).")


if __name__ == "__main__":
    print(f"Starting database migration on {os.getenv('DATABASE_URL', engine.url)}...")

    # Run migrations
    run_migrations()

    print("Migration complete!")

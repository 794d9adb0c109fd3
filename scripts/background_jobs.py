#!/usr/bin/env python3
"""
Background jobs for keeping the leaderboard consistent.
Run as cron jobs or scheduled tasks.

Usage:
    python scripts/background_jobs.py reconcile-stats
    python scripts/background_jobs.py validate-integrity
    python scripts/background_jobs.py cleanup-tokens
    python scripts/background_jobs.py seed-games
    python scripts/background_jobs.py system-stats
"""

import sys
import logging
from datetime import datetime
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import func
from sqlalchemy.orm import sessionmaker
from app.core.catalog import seed_games
from app.core.database import engine
from app.models.achievement import Achievement
from app.models.friendship import Friendship, FriendshipStatus
from app.models.game import Game
from app.models.score import Score
from app.models.user import User
from app.services.consistency_manager import ConsistencyManager

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler('background_jobs.log'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def reconcile_user_stats():
    """Nightly job: rebuild every user's stats from the scores table."""
    logger.info("=== STARTING USER STATS RECONCILIATION ===")

    with SessionLocal() as db:
        consistency_manager = ConsistencyManager(db)

        try:
            stats = consistency_manager.reconcile_all_user_stats(batch_size=1000)

            logger.info(f"Reconciliation completed successfully:")
            logger.info(f"  Total users: {stats['total_users']}")
            logger.info(f"  Updated users: {stats['updated_users']}")
            logger.info(f"  Errors: {stats['errors']}")
            logger.info(f"  Duration: {stats['duration']}")
            logger.info(f"  Batches processed: {stats['batches_processed']}")

            return stats['errors'] == 0

        except Exception as e:
            logger.error(f"Fatal error in reconciliation: {e}")
            return False


def validate_data_integrity():
    """Weekly job: Comprehensive data integrity validation."""
    logger.info("=== STARTING DATA INTEGRITY VALIDATION ===")

    with SessionLocal() as db:
        consistency_manager = ConsistencyManager(db)

        try:
            results = consistency_manager.validate_data_integrity()

            logger.info(f"Integrity validation completed:")
            logger.info(f"  Total issues found: {results['total_issues']}")

            for issue_type, issues in results['issues'].items():
                if issues:
                    logger.warning(f"  {issue_type}: {len(issues)} issues")
                    for issue in issues[:5]:  # Log first 5 issues
                        logger.warning(f"    {issue}")
                    if len(issues) > 5:
                        logger.warning(f"    ... and {len(issues) - 5} more")
                else:
                    logger.info(f"  {issue_type}: No issues found")

            return results['total_issues'] == 0

        except Exception as e:
            logger.error(f"Error in integrity validation: {e}")
            return False


def cleanup_reset_tokens():
    """Daily job: drop expired password reset tokens."""
    logger.info("=== STARTING RESET TOKEN CLEANUP ===")

    with SessionLocal() as db:
        consistency_manager = ConsistencyManager(db)

        try:
            deleted_count = consistency_manager.cleanup_expired_reset_tokens()
            logger.info(f"Token cleanup completed: {deleted_count} tokens removed")
            return True

        except Exception as e:
            logger.error(f"Error in token cleanup: {e}")
            return False


def seed_game_catalog():
    """One-time job: insert catalog games that are missing."""
    logger.info("=== SEEDING GAME CATALOG ===")

    with SessionLocal() as db:
        try:
            added = seed_games(db)
            logger.info(f"Seeding completed: {added} games added")
            return True

        except Exception as e:
            logger.error(f"Error seeding games: {e}")
            return False


def show_system_stats():
    """Show current system statistics."""
    logger.info("=== SYSTEM STATISTICS ===")

    with SessionLocal() as db:
        try:
            total_users = db.query(func.count(User.id)).scalar()
            users_with_scores = db.query(func.count(func.distinct(Score.user_id))).scalar()
            total_games = db.query(func.count(Game.id)).scalar()
            games_with_scores = db.query(func.count(func.distinct(Score.game_id))).scalar()
            total_scores = db.query(func.count(Score.id)).scalar()
            total_achievements = db.query(func.count(Achievement.id)).scalar()
            accepted = db.query(func.count(Friendship.id)).filter(
                Friendship.status == FriendshipStatus.ACCEPTED.value
            ).scalar()
            pending = db.query(func.count(Friendship.id)).filter(
                Friendship.status == FriendshipStatus.PENDING.value
            ).scalar()

            logger.info(f"Users: {total_users} total, {users_with_scores} with scores")
            logger.info(f"Games: {total_games} total, {games_with_scores} with scores")
            logger.info(f"Scores: {total_scores} total")
            logger.info(f"Achievements: {total_achievements} unlocked")
            logger.info(f"Friendships: {accepted} accepted, {pending} pending")

            return True

        except Exception as e:
            logger.error(f"Error getting system stats: {e}")
            return False


COMMANDS = {
    "reconcile-stats": reconcile_user_stats,
    "validate-integrity": validate_data_integrity,
    "cleanup-tokens": cleanup_reset_tokens,
    "seed-games": seed_game_catalog,
    "system-stats": show_system_stats,
}


def main():
    if len(sys.argv) != 2 or sys.argv[1] not in COMMANDS:
        if len(sys.argv) == 2:
            logger.error(f"Unknown command: {sys.argv[1]}")
        print(__doc__)
        sys.exit(1)

    command = sys.argv[1]
    start_time = datetime.now()
    success = COMMANDS[command]()
    logger.info(f"Command '{command}' finished in {datetime.now() - start_time}")

    if not success:
        logger.error("Job failed")
        sys.exit(1)
    logger.info("Job completed successfully")


if __name__ == "__main__":
    main()

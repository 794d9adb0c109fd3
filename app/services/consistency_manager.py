"""
Background consistency jobs: user_stats must always match what the scores
table says.
"""
import logging
from datetime import datetime
from typing import Dict, Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.database import utcnow
from app.models.friendship import Friendship, make_pair_key
from app.models.password_reset_token import PasswordResetToken
from app.models.score import Score
from app.models.user import User
from app.models.user_stats import UserStats
from app.services.user_stats_manager import UserStatsManager

logger = logging.getLogger(__name__)


class ConsistencyManager:
    """Manages background jobs for data consistency and integrity."""

    def __init__(self, db: Session):
        self.db = db
        self.stats_manager = UserStatsManager(db)

    def reconcile_all_user_stats(self, batch_size: int = 1000) -> Dict[str, Any]:
        """Rebuild every user's stats row from the scores table."""
        logger.info("Starting full user stats reconciliation")

        stats = {
            "total_users": 0,
            "updated_users": 0,
            "errors": 0,
            "start_time": datetime.now(),
            "batches_processed": 0
        }

        try:
            total_users = self.db.query(func.count(User.id)).scalar()
            stats["total_users"] = total_users

            logger.info(f"Reconciling {total_users} users in batches of {batch_size}")

            offset = 0
            while True:
                user_ids = self.db.query(User.id).order_by(User.id).offset(offset).limit(batch_size).all()

                if not user_ids:
                    break

                batch_updated = 0
                batch_errors = 0

                for user_id, in user_ids:
                    try:
                        before = self._snapshot(user_id)
                        self.stats_manager.recalculate_user_stats(user_id)
                        after = self._snapshot(user_id)

                        if before != after:
                            batch_updated += 1
                            logger.debug(f"Updated user {user_id}: {before} -> {after}")

                    except Exception as e:
                        batch_errors += 1
                        logger.error(f"Error reconciling user {user_id}: {e}")

                try:
                    self.db.commit()
                    stats["updated_users"] += batch_updated
                    stats["errors"] += batch_errors
                    stats["batches_processed"] += 1

                    logger.info(
                        f"Batch {stats['batches_processed']}: "
                        f"updated {batch_updated}, errors {batch_errors} "
                        f"(total: {stats['updated_users']}/{total_users})"
                    )

                except Exception as e:
                    logger.error(f"Error committing batch: {e}")
                    self.db.rollback()
                    stats["errors"] += len(user_ids)

                offset += batch_size

        except Exception as e:
            logger.error(f"Fatal error in reconciliation: {e}")
            stats["errors"] += 1

        finally:
            stats["end_time"] = datetime.now()
            stats["duration"] = stats["end_time"] - stats["start_time"]

        logger.info(
            f"Reconciliation completed: "
            f"{stats['updated_users']} updated, "
            f"{stats['errors']} errors, "
            f"duration: {stats['duration']}"
        )

        return stats

    def _snapshot(self, user_id: str):
        return self.db.query(
            UserStats.total_games_played,
            UserStats.total_score_sum,
            UserStats.rank_by_game_count
        ).filter(UserStats.user_id == user_id).first()

    def validate_data_integrity(self) -> Dict[str, Any]:
        """Run comprehensive data integrity checks."""
        logger.info("Starting data integrity validation")

        issues = {
            "stats_mismatches": self._check_stats_mismatches(),
            "missing_stats": self._check_missing_stats(),
            "rank_mismatches": self._check_rank_mismatches(),
            "bad_friendship_keys": self._check_friendship_keys(),
            "expired_reset_tokens": self._check_expired_reset_tokens(),
        }

        total_issues = sum(len(issue_list) for issue_list in issues.values())

        logger.info(f"Data integrity check completed: {total_issues} total issues found")

        return {
            "timestamp": datetime.now(),
            "total_issues": total_issues,
            "issues": issues
        }

    def _check_stats_mismatches(self) -> list:
        """Stats rows whose totals differ from the scores table."""
        actual = {
            user_id: (games, int(total or 0))
            for user_id, games, total in self.db.query(
                Score.user_id, func.count(Score.game_id), func.sum(Score.score)
            ).group_by(Score.user_id).all()
        }

        mismatches = []
        for stats in self.db.query(UserStats).all():
            games, total = actual.get(stats.user_id, (0, 0))
            if stats.total_games_played != games or int(stats.total_score_sum) != total:
                mismatches.append({
                    "user_id": stats.user_id,
                    "stored_games": stats.total_games_played,
                    "actual_games": games,
                    "stored_total": int(stats.total_score_sum),
                    "actual_total": total
                })

        if mismatches:
            logger.warning(f"Found {len(mismatches)} stats mismatches")

        return mismatches

    def _check_missing_stats(self) -> list:
        """Users without a user_stats row."""
        missing = self.db.query(User.id).outerjoin(
            UserStats, UserStats.user_id == User.id
        ).filter(UserStats.id.is_(None)).all()

        issues = [{"user_id": user_id} for user_id, in missing]
        if issues:
            logger.warning(f"Found {len(issues)} users without stats")

        return issues

    def _check_rank_mismatches(self) -> list:
        ranks = {uid: i for i, uid in enumerate(self.stats_manager.compute_rankings(), 1)}

        issues = [
            {"user_id": user_id, "stored_rank": stored, "actual_rank": ranks.get(user_id)}
            for user_id, stored in self.db.query(UserStats.user_id, UserStats.rank_by_game_count).all()
            if stored != ranks.get(user_id)
        ]
        if issues:
            logger.warning(f"Found {len(issues)} stale ranks")

        return issues

    def _check_friendship_keys(self) -> list:
        """Edges whose pair key does not match their endpoints, which would let a duplicate in."""
        issues = [
            {"friendship_id": fid, "pair_key": pair_key}
            for fid, user_id, friend_id, pair_key in self.db.query(
                Friendship.id, Friendship.user_id, Friendship.friend_id, Friendship.pair_key
            ).all()
            if pair_key != make_pair_key(user_id, friend_id)
        ]
        if issues:
            logger.warning(f"Found {len(issues)} friendships with a bad pair key")

        return issues

    def _check_expired_reset_tokens(self) -> list:
        expired = self.db.query(PasswordResetToken.id, PasswordResetToken.user_id).filter(
            PasswordResetToken.expires_at <= utcnow()
        ).all()
        return [{"token_id": token_id, "user_id": user_id} for token_id, user_id in expired]

    def cleanup_expired_reset_tokens(self) -> int:
        """Delete reset tokens past their expiry."""
        deleted_count = self.db.query(PasswordResetToken).filter(
            PasswordResetToken.expires_at <= utcnow()
        ).delete()

        self.db.commit()

        logger.info(f"Cleaned up {deleted_count} expired reset tokens")
        return deleted_count

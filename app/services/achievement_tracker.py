"""
Achievement unlocking.

Unlocked achievements form a set that only grows: evaluation adds whatever
newly qualifies and never removes a type, even when the triggering
condition stops holding (a deleted score, a lost top-10 rank).
"""
import logging
from typing import List, Optional, Set

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.catalog import FIRST_SCORE_GAMES, FIVE_GAMES, TEN_GAMES
from app.core.config import settings
from app.models.achievement import Achievement, AchievementType
from app.models.score import Score
from app.models.user_stats import UserStats

logger = logging.getLogger(__name__)


def qualifying_achievements(game_count: int, rank: Optional[int],
                            top_rank: int = settings.TOP_RANK_THRESHOLD) -> Set[AchievementType]:
    """Achievement types earned by a user with ``game_count`` distinct games at ``rank``."""
    earned = set()
    if game_count >= FIRST_SCORE_GAMES:
        earned.add(AchievementType.FIRST_SCORE)
    if game_count >= FIVE_GAMES:
        earned.add(AchievementType.FIVE_GAMES)
    if game_count >= TEN_GAMES:
        earned.add(AchievementType.TEN_GAMES)
    if rank is not None and rank <= top_rank:
        earned.add(AchievementType.TOP_10)
    return earned


class AchievementTracker:

    def __init__(self, db: Session):
        self.db = db

    def unlocked_types(self, user_id: str) -> Set[str]:
        rows = self.db.query(Achievement.type).filter(Achievement.user_id == user_id).all()
        return {achievement_type for achievement_type, in rows}

    def check_achievements(self, user_id: str) -> List[str]:
        """
        Unlock every achievement the user now qualifies for.

        Expects user_stats to be freshly recalculated. Returns the types
        unlocked by this call, in declaration order.
        """
        game_count = self.db.query(
            func.count(func.distinct(Score.game_id))
        ).filter(Score.user_id == user_id).scalar() or 0

        rank = self.db.query(UserStats.rank_by_game_count).filter(
            UserStats.user_id == user_id
        ).scalar()

        unlocked = self.unlocked_types(user_id)
        earned = qualifying_achievements(game_count, rank)

        newly_unlocked = []
        for achievement_type in AchievementType:
            if achievement_type in earned and achievement_type.value not in unlocked:
                self.db.add(Achievement(user_id=user_id, type=achievement_type.value))
                newly_unlocked.append(achievement_type.value)

        if newly_unlocked:
            self.db.flush()
            logger.info(f"User {user_id} unlocked achievements: {', '.join(newly_unlocked)}")

        return newly_unlocked

    def get_achievements(self, user_id: str) -> List[Achievement]:
        return self.db.query(Achievement).filter(
            Achievement.user_id == user_id
        ).order_by(Achievement.unlocked_at.asc()).all()

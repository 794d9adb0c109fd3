"""
Recomputation of the denormalized user_stats table from scores.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.database import utcnow
from app.models.score import Score
from app.models.user_stats import UserStats

logger = logging.getLogger(__name__)


class UserStatsManager:
    """Rebuilds user_stats rows from the scores table after every score mutation."""

    def __init__(self, db: Session):
        self.db = db

    def compute_rankings(self) -> List[str]:
        """
        User ids ordered by distinct games scored, most first.

        Ties fall back to score sum, then user id, so positions are stable
        between calls.
        """
        game_count = func.count(Score.game_id)
        score_sum = func.sum(Score.score)
        rows = self.db.query(Score.user_id).group_by(
            Score.user_id
        ).order_by(
            game_count.desc(),
            score_sum.desc(),
            Score.user_id.asc()
        ).all()
        return [user_id for user_id, in rows]

    def recalculate_user_stats(self, user_id: str) -> UserStats:
        """
        Recompute totals for one user and refresh every stored rank.

        Runs inside the caller's transaction; the caller commits.
        """
        game_count, total_score = self.db.query(
            func.count(Score.game_id),
            func.coalesce(func.sum(Score.score), 0)
        ).filter(Score.user_id == user_id).one()

        ranks = self._rank_lookup()

        stats = self.db.query(UserStats).filter(UserStats.user_id == user_id).first()
        if stats is None:
            stats = UserStats(user_id=user_id)
            self.db.add(stats)

        stats.total_games_played = game_count
        stats.total_score_sum = int(total_score)
        stats.rank_by_game_count = ranks.get(user_id)
        stats.last_recalculated_at = utcnow()

        # A write shifts everyone below this user, so keep the other rows in line
        self._apply_ranks(ranks, skip_user_id=user_id)
        self.db.flush()

        logger.info(
            f"User {user_id} stats recalculated: "
            f"games={game_count}, total={total_score}, rank={stats.rank_by_game_count}"
        )
        return stats

    def get_rank(self, user_id: str) -> Optional[int]:
        return self._rank_lookup().get(user_id)

    def _rank_lookup(self) -> Dict[str, int]:
        return {uid: position for position, uid in enumerate(self.compute_rankings(), 1)}

    def _apply_ranks(self, ranks: Dict[str, int], skip_user_id: Optional[str] = None) -> None:
        for stats in self.db.query(UserStats).filter(UserStats.user_id != skip_user_id).all():
            new_rank = ranks.get(stats.user_id)
            if stats.rank_by_game_count != new_rank:
                stats.rank_by_game_count = new_rank


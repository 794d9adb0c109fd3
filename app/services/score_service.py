import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.database import utcnow
from app.core.exceptions import (
    GameNotFound, UserNotFound, ScoreNotFound, ScoreNotHigher, NotScoreOwner,
    OperationFailed
)
from app.models.game import Game
from app.models.score import Score
from app.models.user import User
from app.services.achievement_tracker import AchievementTracker
from app.services.user_stats_manager import UserStatsManager

logger = logging.getLogger(__name__)


def _as_naive_utc(value: Optional[datetime]) -> datetime:
    if value is None:
        return utcnow()
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class ScoreService:
    """
    Personal-best score pipeline.

    A submission is applied only when it beats the user's stored score for
    the game. Leadership is checked against the table as it stood before the
    write, then the score is upserted and user_stats and achievements are
    rebuilt. All of it commits as one transaction.
    """

    def submit_score(self, db: Session, user_id: str, game_id: str, score: int,
                     achieved_at: Optional[datetime] = None) -> dict:
        if db.query(User.id).filter(User.id == user_id).first() is None:
            raise UserNotFound(f"User {user_id} not found")

        game = db.query(Game).filter(Game.id == game_id).first()
        if not game:
            raise GameNotFound(f"Game {game_id} not found")

        achieved_at = _as_naive_utc(achieved_at)

        try:
            existing = db.query(Score).filter(
                Score.user_id == user_id,
                Score.game_id == game_id
            ).with_for_update().first()

            # Ties are not an improvement
            if existing and existing.score >= score:
                logger.info(
                    f"Rejected score {score} for user {user_id} on '{game.name}': "
                    f"personal best is {existing.score}"
                )
                db.rollback()
                raise ScoreNotHigher("New score must be higher than existing score")

            leader = self._detect_leader_change(db, user_id, game_id, score)

            if existing:
                existing.score = score
                existing.achieved_at = achieved_at
                stored = existing
            else:
                stored = Score(user_id=user_id, game_id=game_id, score=score, achieved_at=achieved_at)
                db.add(stored)
            db.flush()

            UserStatsManager(db).recalculate_user_stats(user_id)
            unlocked = AchievementTracker(db).check_achievements(user_id)

            db.commit()
            db.refresh(stored)

        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error submitting score for user {user_id} on game {game_id}: {e}", exc_info=True)
            raise OperationFailed("Failed to submit score") from e

        logger.info(f"User {user_id} set personal best {score} on '{game.name}'")

        result = {
            "success": True,
            "message": "Score submitted successfully",
            "score": stored,
            "unlocked_achievements": unlocked,
            "new_leader": False,
        }
        if leader is not None:
            result.update(
                new_leader=True,
                game_name=game.name,
                is_first_leader=leader["is_first_leader"],
                previous_leader=leader["previous_leader"],
            )
        return result

    def _detect_leader_change(self, db: Session, user_id: str, game_id: str, score: int) -> Optional[dict]:
        """
        Compare the candidate against the game's current top score.

        Returns None when leadership does not change.
        """
        top = self.get_top_score(db, game_id)

        if top is None:
            return {"is_first_leader": True, "previous_leader": None}

        if top.user_id != user_id and score > top.score:
            return {"is_first_leader": False, "previous_leader": top.user.username}

        return None

    def get_top_score(self, db: Session, game_id: str) -> Optional[Score]:
        """Highest score for a game; equal scores go to whoever got there first."""
        return db.query(Score).options(joinedload(Score.user)).filter(
            Score.game_id == game_id
        ).order_by(
            Score.score.desc(),
            Score.achieved_at.asc(),
            Score.id.asc()
        ).first()

    def delete_score(self, db: Session, user_id: str, score_id: str) -> dict:
        score = db.query(Score).filter(Score.id == score_id).first()
        if not score:
            raise ScoreNotFound("Score not found")

        if score.user_id != user_id:
            logger.warning(f"User {user_id} tried to delete score {score_id} owned by {score.user_id}")
            raise NotScoreOwner("Unauthorized: You can only delete your own scores")

        try:
            db.delete(score)
            db.flush()

            UserStatsManager(db).recalculate_user_stats(user_id)
            # Re-check only adds; achievements already earned stay
            AchievementTracker(db).check_achievements(user_id)

            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error deleting score {score_id}: {e}", exc_info=True)
            raise OperationFailed("Failed to delete score") from e

        logger.info(f"User {user_id} deleted score {score_id}")
        return {"success": True, "message": "Score deleted successfully"}

    def get_user_scores(self, db: Session, user_id: str) -> List[Score]:
        return db.query(Score).options(joinedload(Score.game)).filter(
            Score.user_id == user_id
        ).order_by(Score.achieved_at.desc()).all()


score_service_obj = ScoreService()

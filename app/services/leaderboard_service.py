"""
Read-only leaderboard queries: rankings, per-game boards, champions and
head-to-head comparison.
"""
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.catalog import get_game_by_name
from app.core.exceptions import GameNotFound, UserNotFound
from app.models.game import Game
from app.models.score import Score
from app.models.user import User

logger = logging.getLogger(__name__)

# Equal scores are ranked by who reached them first
SCORE_ORDER = (Score.score.desc(), Score.achieved_at.asc(), Score.id.asc())


class LeaderboardService:

    def get_leaderboard(self, db: Session, user_ids: Optional[Iterable[str]] = None) -> List[dict]:
        """
        Rank users by how many distinct games they have scored.

        Breadth of play wins over score magnitude; the score sum only
        breaks ties. ``user_ids`` restricts the board (friends view).
        """
        query = db.query(
            Score.user_id,
            func.count(Score.game_id).label("game_count"),
            func.sum(Score.score).label("total_score")
        ).group_by(Score.user_id)

        if user_ids is not None:
            query = query.filter(Score.user_id.in_(list(user_ids)))

        rows = query.all()
        if not rows:
            return []

        ids = [row.user_id for row in rows]
        users = {user.id: user for user in db.query(User).filter(User.id.in_(ids)).all()}
        best_games = self._best_games(db, ids)

        leaderboard = []
        for user_id, game_count, total_score in rows:
            user = users.get(user_id)
            leaderboard.append({
                "user_id": user_id,
                "username": user.username if user else "Unknown",
                "avatar_url": user.avatar_url if user else None,
                "game_count": game_count,
                "total_score": int(total_score or 0),
                "best_game": best_games.get(user_id),
            })

        leaderboard.sort(key=lambda e: (-e["game_count"], -e["total_score"], e["username"]))
        for i, entry in enumerate(leaderboard, 1):
            entry["rank"] = i

        return leaderboard

    def _best_games(self, db: Session, user_ids: List[str]) -> Dict[str, str]:
        """Name of each user's single highest-scoring game."""
        scores = db.query(Score.user_id, Game.name).join(Game, Score.game_id == Game.id).filter(
            Score.user_id.in_(user_ids)
        ).order_by(Score.user_id, *SCORE_ORDER).all()

        best = {}
        for user_id, game_name in scores:
            best.setdefault(user_id, game_name)
        return best

    def resolve_game(self, db: Session, game_id: Optional[str] = None,
                     game_name: Optional[str] = None) -> Game:
        if game_id:
            game = db.query(Game).filter(Game.id == game_id).first()
        else:
            game = get_game_by_name(db, game_name)

        if not game:
            raise GameNotFound(f"Game {game_id or game_name} not found")
        return game

    def get_game_leaderboard(self, db: Session, game: Game,
                             user_ids: Optional[Iterable[str]] = None) -> List[dict]:
        """All scores for one game, best first, with each scorer's overall game count."""
        query = db.query(Score).options(joinedload(Score.user)).filter(Score.game_id == game.id)
        if user_ids is not None:
            query = query.filter(Score.user_id.in_(list(user_ids)))

        scores = query.order_by(*SCORE_ORDER).all()
        if not scores:
            return []

        game_counts = dict(
            db.query(Score.user_id, func.count(Score.game_id)).filter(
                Score.user_id.in_([s.user_id for s in scores])
            ).group_by(Score.user_id).all()
        )

        return [
            {
                "rank": i,
                "user_id": s.user_id,
                "username": s.user.username,
                "avatar_url": s.user.avatar_url,
                "score": s.score,
                "achieved_at": s.achieved_at,
                "game_count": game_counts.get(s.user_id, 0),
            }
            for i, s in enumerate(scores, 1)
        ]

    def get_game_champions(self, db: Session) -> List[dict]:
        """The top scorer of every game that has at least one score."""
        scores = db.query(Score).options(
            joinedload(Score.user), joinedload(Score.game)
        ).order_by(Score.game_id, *SCORE_ORDER).all()

        champions = {}
        for s in scores:
            if s.game_id in champions:
                continue
            champions[s.game_id] = {
                "game_id": s.game_id,
                "game_name": s.game.name,
                "category": s.game.category,
                "user_id": s.user_id,
                "username": s.user.username,
                "avatar_url": s.user.avatar_url,
                "score": s.score,
                "achieved_at": s.achieved_at,
            }

        return sorted(champions.values(), key=lambda c: c["game_name"])

    def get_user_champions(self, db: Session) -> List[dict]:
        """Game champions regrouped by user: how many games each user leads."""
        by_user = {}
        for champion in self.get_game_champions(db):
            entry = by_user.setdefault(champion["user_id"], {
                "user_id": champion["user_id"],
                "username": champion["username"],
                "avatar_url": champion["avatar_url"],
                "games_led": 0,
                "leading_games": [],
            })
            entry["games_led"] += 1
            entry["leading_games"].append(champion["game_name"])

        for entry in by_user.values():
            entry["leading_games"].sort()

        return sorted(by_user.values(), key=lambda e: (-e["games_led"], e["username"]))

    def compare_with_friend(self, db: Session, user_id: str, friend_id: str) -> dict:
        """
        Head-to-head over every game either user has scored, from
        ``user_id``'s point of view.
        """
        for uid in (user_id, friend_id):
            if db.query(User.id).filter(User.id == uid).first() is None:
                raise UserNotFound(f"User {uid} not found")

        user_scores = self._scores_by_game(db, user_id)
        friend_scores = self._scores_by_game(db, friend_id)

        comparisons = []
        for game_id in set(user_scores) | set(friend_scores):
            mine = user_scores.get(game_id)
            theirs = friend_scores.get(game_id)
            game = (mine or theirs).game
            comparisons.append({
                "game_id": game_id,
                "game_name": game.name,
                "user_score": mine.score if mine else None,
                "friend_score": theirs.score if theirs else None,
                "result": compare_result(
                    mine.score if mine else None,
                    theirs.score if theirs else None
                ),
            })

        comparisons.sort(key=lambda c: c["game_name"])

        return {
            "comparisons": comparisons,
            "record": {
                "wins": sum(1 for c in comparisons if c["result"] == "win"),
                "losses": sum(1 for c in comparisons if c["result"] == "loss"),
                "ties": sum(1 for c in comparisons if c["result"] == "tie"),
            },
            "user_games_count": len(user_scores),
            "friend_games_count": len(friend_scores),
        }

    def _scores_by_game(self, db: Session, user_id: str) -> Dict[str, Score]:
        scores = db.query(Score).options(joinedload(Score.game)).filter(Score.user_id == user_id).all()
        return {s.game_id: s for s in scores}


def compare_result(user_score: Optional[int], friend_score: Optional[int]) -> str:
    """Outcome of one game from the first player's side; playing beats not playing."""
    if user_score is not None and friend_score is not None:
        if user_score > friend_score:
            return "win"
        if user_score < friend_score:
            return "loss"
        return "tie"
    if user_score is not None:
        return "win"
    if friend_score is not None:
        return "loss"
    return "not_played"


leaderboard_service_obj = LeaderboardService()

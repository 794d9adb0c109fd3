"""
Leaderboard API endpoints.
"""
from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas import leaderboard as leaderboard_schemas
from app.services.friend_service import friend_service_obj
from app.services.leaderboard_service import leaderboard_service_obj


class LeaderboardType(str, Enum):
    GLOBAL = "global"
    FRIENDS = "friends"


router = APIRouter(
    prefix="/leaderboard",
    tags=["leaderboard"]
)


@router.get("")
def get_leaderboard(
        type: LeaderboardType = Query(LeaderboardType.GLOBAL, description="Global or friends-only ranking"),
        user_id: Optional[str] = Query(None, alias="userId"),
        game_id: Optional[str] = Query(None, alias="gameId"),
        game_name: Optional[str] = Query(None, alias="gameName"),
        champions: bool = Query(False, description="Top scorer of every game"),
        user_champions: bool = Query(False, alias="userChampions", description="Games led per user"),
        db: Session = Depends(get_db)
):
    """
    Get a leaderboard.

    The first matching mode wins:
    - champions: top scorer of every game
    - userChampions: number of games each user currently leads
    - gameId / gameName: every score for one game, best first
    - otherwise users ranked by distinct games scored

    type=friends together with userId limits the board to that user and
    their friends.
    """
    if champions:
        return [
            leaderboard_schemas.GameChampion(**c)
            for c in leaderboard_service_obj.get_game_champions(db)
        ]

    if user_champions:
        return [
            leaderboard_schemas.UserChampion(**c)
            for c in leaderboard_service_obj.get_user_champions(db)
        ]

    user_ids = None
    if type == LeaderboardType.FRIENDS and user_id:
        user_ids = friend_service_obj.get_friend_closure(db, user_id)

    if game_id or game_name:
        game = leaderboard_service_obj.resolve_game(db, game_id=game_id, game_name=game_name)
        return [
            leaderboard_schemas.GameLeaderboardEntry(**e)
            for e in leaderboard_service_obj.get_game_leaderboard(db, game, user_ids)
        ]

    return [
        leaderboard_schemas.LeaderboardEntry(**e)
        for e in leaderboard_service_obj.get_leaderboard(db, user_ids)
    ]

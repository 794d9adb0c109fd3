"""
Friend graph endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.models.user import User
from app.schemas import friend as friend_schemas
from app.schemas import leaderboard as leaderboard_schemas
from app.schemas import user as user_schemas
from app.services.friend_service import friend_service_obj
from app.services.leaderboard_service import leaderboard_service_obj

router = APIRouter(
    prefix="/friends",
    tags=["friends"]
)


@router.get("", response_model=List[user_schemas.PublicUser])
def get_friends(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    return friend_service_obj.get_friends(db, current_user.id)


@router.get("/requests", response_model=List[friend_schemas.FriendRequestResponse])
def get_friend_requests(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """Pending requests waiting for the logged-in user."""
    return friend_service_obj.get_friend_requests(db, current_user.id)


@router.post("/requests", response_model=friend_schemas.FriendRequestResponse)
def send_friend_request(
        payload: friend_schemas.FriendRequestCreate,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """
    Ask another user to be friends.

    Rejected when the users are already friends or a request between them
    is pending in either direction.
    """
    return friend_service_obj.send_friend_request(db, current_user.id, str(payload.friend_id))


@router.post("/requests/{request_id}/accept", response_model=friend_schemas.FriendRequestResponse)
def accept_friend_request(
        request_id: str,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    return friend_service_obj.accept_friend_request(db, current_user.id, request_id)


@router.get("/compare", response_model=leaderboard_schemas.FriendComparison)
def compare_with_friend(
        user_id: Optional[str] = Query(None, alias="userId"),
        friend_id: Optional[str] = Query(None, alias="friendId"),
        db: Session = Depends(get_db)
):
    """
    Head-to-head comparison over every game either user has scored.

    Each game is a win, loss or tie from userId's side; a game only one of
    them has played counts for the one who played it.
    """
    if not user_id or not friend_id:
        raise HTTPException(status_code=400, detail="Missing userId or friendId")

    return leaderboard_service_obj.compare_with_friend(db, user_id, friend_id)

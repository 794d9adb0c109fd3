"""
User-related API endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.models.user import User
from app.schemas import user as user_schemas
from app.services.friend_service import friend_service_obj
from app.services.user_service import user_service_obj

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"description": "User not found"}}
)


@router.get("", response_model=List[user_schemas.PublicUser])
def list_users(db: Session = Depends(get_db)):
    """Every user, by username."""
    return friend_service_obj.list_users(db)


@router.get("/{user_id}/stats", response_model=user_schemas.UserStatsResponse)
def get_user_stats(
        user_id: str,
        db: Session = Depends(get_db)
):
    """
    Get the stored statistics for a user.

    Returns:
    - Distinct games scored
    - Sum of personal bests
    - Rank by game count
    - Unlocked achievements
    """
    return user_service_obj.get_user_stats(db, user_id)


@router.patch("/{user_id}", response_model=user_schemas.UserResponse)
def update_user(
        user_id: str,
        payload: user_schemas.UserUpdate,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """
    Update a profile.

    Members may only edit themselves; admins may edit anyone and change
    roles, as long as one admin remains.
    """
    return user_service_obj.update_user(
        db,
        current_user.id,
        user_id,
        username=payload.username,
        email=payload.email,
        avatar_url=payload.avatar_url,
        role=payload.role.value if payload.role else None,
        password=payload.password
    )

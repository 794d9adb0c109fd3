"""
Score submission endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.models.user import User
from app.schemas import score as score_schemas
from app.schemas import user as user_schemas
from app.services.score_service import score_service_obj

router = APIRouter(
    prefix="/scores",
    tags=["scores"],
    responses={404: {"description": "Game or score not found"}}
)


@router.post("", response_model=score_schemas.ScoreSubmitResponse)
def submit_score(
        payload: score_schemas.ScoreCreate,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """
    Submit a score for the logged-in user.

    Only a score higher than the user's personal best for the game is
    stored. When the submission takes the lead in the game the response
    carries:
    - new_leader / game_name
    - is_first_leader when nobody had scored the game before
    - previous_leader when another user was dethroned
    """
    return score_service_obj.submit_score(
        db,
        current_user.id,
        str(payload.game_id),
        payload.score,
        payload.achieved_at
    )


@router.get("", response_model=List[score_schemas.ScoreResponse])
def get_my_scores(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """The logged-in user's personal bests, most recent first."""
    return score_service_obj.get_user_scores(db, current_user.id)


@router.delete("/{score_id}", response_model=user_schemas.ActionResponse)
def delete_score(
        score_id: str,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """Delete one of the logged-in user's scores. Achievements are kept."""
    return score_service_obj.delete_score(db, current_user.id, score_id)

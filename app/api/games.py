"""
Game catalog endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.catalog import list_games
from app.schemas import game as game_schemas

router = APIRouter(
    prefix="/games",
    tags=["games"]
)


@router.get("", response_model=List[game_schemas.GameResponse])
def get_games(db: Session = Depends(get_db)):
    """All games, alphabetically."""
    return list_games(db)

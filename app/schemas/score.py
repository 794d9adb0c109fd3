from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID

from app.schemas.game import GameResponse

# Largest value a 32-bit INTEGER column holds
MAX_SCORE = 2147483647


class ScoreCreate(BaseModel):
    game_id: UUID = Field(..., description="Game the score was achieved in")
    score: int = Field(..., gt=0, le=MAX_SCORE, description="Score must be a positive number")
    achieved_at: Optional[datetime] = Field(None, description="Defaults to submission time")


class ScoreResponse(BaseModel):
    id: str
    game_id: str
    score: int
    achieved_at: datetime
    game: GameResponse

    model_config = ConfigDict(from_attributes=True)


class ScoreSubmitResponse(BaseModel):
    success: bool
    message: str
    score: ScoreResponse
    unlocked_achievements: List[str] = []
    new_leader: bool = False
    game_name: Optional[str] = None
    is_first_leader: Optional[bool] = None
    previous_leader: Optional[str] = Field(None, description="Username of the dethroned leader")

from pydantic import BaseModel, ConfigDict
from typing import Optional

from app.models.game import GameCategory


class GameResponse(BaseModel):
    id: str
    name: str
    category: GameCategory
    description: str
    icon: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

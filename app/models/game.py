from enum import Enum

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base, generate_uuid


class GameCategory(str, Enum):
    ATTENTION = "ATTENTION"
    MEMORY = "MEMORY"
    FLEXIBILITY = "FLEXIBILITY"
    SPEED = "SPEED"
    PROBLEM_SOLVING = "PROBLEM_SOLVING"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class Game(Base):
    """Reference data: seeded once from the catalog, never edited through the API."""
    __tablename__ = "games"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), unique=True, nullable=False, index=True)
    category = Column(String(20), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    icon = Column(String(100))

    scores = relationship("Score", back_populates="game")

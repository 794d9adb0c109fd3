from enum import Enum

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base, generate_uuid, utcnow


class AchievementType(str, Enum):
    FIRST_SCORE = "FIRST_SCORE"
    FIVE_GAMES = "FIVE_GAMES"
    TEN_GAMES = "TEN_GAMES"
    TOP_10 = "TOP_10"
    # Display-only, nothing unlocks these yet
    STREAK_MASTER = "STREAK_MASTER"
    PERFECTIONIST = "PERFECTIONIST"


class Achievement(Base):
    """Append-only: rows are never updated or deleted once unlocked."""
    __tablename__ = "achievements"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    unlocked_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="achievements")

    __table_args__ = (
        UniqueConstraint("user_id", "type", name="unique_user_achievement"),
    )

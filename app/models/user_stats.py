from sqlalchemy import Column, Integer, BigInteger, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.core.database import Base, generate_uuid


class UserStats(Base):
    """
    Denormalized per-user aggregates.

    Always rebuilt from the scores table by UserStatsManager, never
    incremented in place.
    """
    __tablename__ = "user_stats"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    total_games_played = Column(Integer, default=0, nullable=False)
    total_score_sum = Column(BigInteger, default=0, nullable=False)
    rank_by_game_count = Column(Integer, index=True)  # None until the user has a score
    last_recalculated_at = Column(DateTime)

    user = relationship("User", back_populates="stats")

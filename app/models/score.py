from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Index
from sqlalchemy.orm import relationship

from app.core.database import Base, generate_uuid, utcnow


class Score(Base):
    """A user's personal best for one game."""
    __tablename__ = "scores"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    game_id = Column(String(36), ForeignKey("games.id", ondelete="CASCADE"), nullable=False)
    score = Column(Integer, nullable=False)
    achieved_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="scores")
    game = relationship("Game", back_populates="scores")

    # Constraints
    __table_args__ = (
        UniqueConstraint('user_id', 'game_id', name='unique_user_game_score'),
        CheckConstraint('score > 0', name='positive_score'),
        Index('idx_scores_game_ranking', 'game_id', 'score'),
    )

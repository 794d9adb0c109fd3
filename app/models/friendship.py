from enum import Enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from app.core.database import Base, generate_uuid, utcnow


class FriendshipStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"


def make_pair_key(user_a: str, user_b: str) -> str:
    """Order-independent key for a pair of users."""
    low, high = sorted((user_a, user_b))
    return f"{low}:{high}"


class Friendship(Base):
    """Directed request edge: user_id asked friend_id."""
    __tablename__ = "friendships"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    friend_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # One edge per unordered pair, whichever side asked first
    pair_key = Column(String(73), unique=True, nullable=False)
    status = Column(String(10), nullable=False, default=FriendshipStatus.PENDING.value)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    user = relationship("User", foreign_keys=[user_id])
    friend = relationship("User", foreign_keys=[friend_id])

    __table_args__ = (
        Index('idx_friendships_user_status', 'user_id', 'status'),
        Index('idx_friendships_friend_status', 'friend_id', 'status'),
    )

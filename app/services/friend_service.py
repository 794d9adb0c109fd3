import logging
from typing import List, Set

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import (
    UserNotFound, SelfFriendRequest, AlreadyFriends,
    FriendRequestPending, FriendRequestNotFound
)
from app.models.friendship import Friendship, FriendshipStatus, make_pair_key
from app.models.user import User

logger = logging.getLogger(__name__)


class FriendService:
    """Friend requests and the symmetric friends relation derived from them."""

    def send_friend_request(self, db: Session, user_id: str, friend_id: str) -> Friendship:
        if user_id == friend_id:
            raise SelfFriendRequest("Cannot send friend request to yourself")

        if db.query(User.id).filter(User.id == friend_id).first() is None:
            raise UserNotFound(f"User {friend_id} not found")

        existing = db.query(Friendship).filter(
            Friendship.pair_key == make_pair_key(user_id, friend_id)
        ).first()

        if existing:
            if existing.status == FriendshipStatus.ACCEPTED.value:
                raise AlreadyFriends("Already friends")
            raise FriendRequestPending("Friend request already pending")

        friendship = Friendship(
            user_id=user_id,
            friend_id=friend_id,
            pair_key=make_pair_key(user_id, friend_id),
            status=FriendshipStatus.PENDING.value
        )
        db.add(friendship)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a request for the same pair
            db.rollback()
            raise FriendRequestPending("Friend request already pending")
        db.refresh(friendship)

        logger.info(f"User {user_id} sent friend request {friendship.id} to {friend_id}")
        return friendship

    def accept_friend_request(self, db: Session, user_id: str, request_id: str) -> Friendship:
        friendship = db.query(Friendship).filter(Friendship.id == request_id).first()

        # Only the recipient can accept
        if not friendship or friendship.friend_id != user_id:
            raise FriendRequestNotFound("Friend request not found")

        friendship.status = FriendshipStatus.ACCEPTED.value
        db.commit()
        db.refresh(friendship)

        logger.info(f"User {user_id} accepted friend request {request_id}")
        return friendship

    def get_friends(self, db: Session, user_id: str) -> List[User]:
        friendships = db.query(Friendship).options(
            joinedload(Friendship.user), joinedload(Friendship.friend)
        ).filter(
            Friendship.status == FriendshipStatus.ACCEPTED.value,
            or_(Friendship.user_id == user_id, Friendship.friend_id == user_id)
        ).all()

        return [f.friend if f.user_id == user_id else f.user for f in friendships]

    def get_friend_ids(self, db: Session, user_id: str) -> Set[str]:
        rows = db.query(Friendship.user_id, Friendship.friend_id).filter(
            Friendship.status == FriendshipStatus.ACCEPTED.value,
            or_(Friendship.user_id == user_id, Friendship.friend_id == user_id)
        ).all()
        return {friend_id if requester_id == user_id else requester_id for requester_id, friend_id in rows}

    def get_friend_closure(self, db: Session, user_id: str) -> Set[str]:
        """The user's friends plus the user, used to scope leaderboards."""
        return self.get_friend_ids(db, user_id) | {user_id}

    def get_friend_requests(self, db: Session, user_id: str) -> List[Friendship]:
        """Pending requests addressed to the user."""
        return db.query(Friendship).options(joinedload(Friendship.user)).filter(
            Friendship.friend_id == user_id,
            Friendship.status == FriendshipStatus.PENDING.value
        ).order_by(Friendship.created_at.asc()).all()

    def list_users(self, db: Session) -> List[User]:
        return db.query(User).order_by(User.username.asc()).all()


friend_service_obj = FriendService()

import logging
import secrets
from datetime import timedelta
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from app.core.config import settings
from app.core.database import utcnow
from app.core.exceptions import (
    UserNotFound, DuplicateAccount, InvalidCredentials, InvalidResetToken
)
from app.models.password_reset_token import PasswordResetToken
from app.models.user import User, UserRole
from app.models.user_stats import UserStats
from app.services.achievement_tracker import AchievementTracker
from app.services.validators import UserUpdateValidator

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


class UserService:

    def __init__(self):
        self.validator = UserUpdateValidator()

    def register(self, db: Session, username: str, email: str, password: str) -> User:
        """Create an account. The very first account becomes the admin."""
        email = email.strip().lower()
        username = username.strip()

        existing = db.query(User).filter(
            or_(User.email == email, User.username == username)
        ).first()
        if existing:
            if existing.email == email:
                raise DuplicateAccount("An account with this email already exists")
            raise DuplicateAccount("This username is already taken")

        is_first = db.query(User.id).first() is None
        user = User(
            email=email,
            username=username,
            role=UserRole.ADMIN.value if is_first else UserRole.MEMBER.value,
            password_hash=hash_password(password)
        )
        db.add(user)
        db.flush()

        db.add(UserStats(user_id=user.id, total_games_played=0, total_score_sum=0))
        db.commit()
        db.refresh(user)

        logger.info(f"Registered user {user.id} '{username}' as {user.role}")
        return user

    def authenticate(self, db: Session, identifier: str, password: str) -> User:
        """Log in by email (case-insensitive) or, failing that, by username."""
        identifier = identifier.strip()

        user = db.query(User).filter(User.email == identifier.lower()).first()
        if not user:
            user = db.query(User).filter(User.username == identifier).first()

        if not user or not check_password_hash(user.password_hash, password):
            logger.info(f"Failed login for '{identifier}'")
            raise InvalidCredentials("Invalid username/email or password")

        return user

    def get_user(self, db: Session, user_id: str) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise UserNotFound(f"User {user_id} not found")
        return user

    def get_user_stats(self, db: Session, user_id: str) -> dict:
        """Stored stats and unlocked achievements for a user."""
        user = self.get_user(db, user_id)
        stats = db.query(UserStats).filter(UserStats.user_id == user_id).first()
        achievements = AchievementTracker(db).get_achievements(user_id)

        return {
            "user_id": user.id,
            "username": user.username,
            "total_games_played": stats.total_games_played if stats else 0,
            "total_score_sum": int(stats.total_score_sum) if stats else 0,
            "rank_by_game_count": stats.rank_by_game_count if stats else None,
            "achievements": achievements,
        }

    def update_user(self, db: Session, actor_id: str, target_id: str, username: str, email: str,
                    avatar_url: Optional[str] = None, role: Optional[str] = None,
                    password: Optional[str] = None) -> User:
        actor = self.get_user(db, actor_id)
        target = self.get_user(db, target_id)

        username = username.strip()
        email = email.strip().lower()
        self.validator.validate_update(db, actor, target, username, email, role)

        target.username = username
        target.email = email
        target.avatar_url = avatar_url.strip() if avatar_url and avatar_url.strip() else None
        if role is not None:
            target.role = role
        if password:
            target.password_hash = hash_password(password)

        db.commit()
        db.refresh(target)

        logger.info(f"User {actor_id} updated user {target_id}")
        return target

    def request_password_reset(self, db: Session, email: str) -> Optional[str]:
        """
        Issue a single-use reset token for the account with this email.

        Returns the reset link, or None for unknown emails. Earlier tokens
        for the user are discarded.
        """
        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if not user:
            logger.info("Password reset requested for unknown email")
            return None

        db.query(PasswordResetToken).filter(PasswordResetToken.user_id == user.id).delete()

        token = secrets.token_urlsafe(32)
        db.add(PasswordResetToken(
            user_id=user.id,
            token=token,
            expires_at=utcnow() + timedelta(minutes=settings.PASSWORD_RESET_TTL_MINUTES)
        ))
        db.commit()

        reset_link = f"{settings.APP_URL.rstrip('/')}/reset-password?token={token}"
        logger.info(f"Password reset token issued for user {user.id}")
        logger.debug(f"Reset link: {reset_link}")
        return reset_link

    def reset_password(self, db: Session, token: str, new_password: str) -> User:
        reset_token = db.query(PasswordResetToken).filter(PasswordResetToken.token == token).first()
        if not reset_token or reset_token.is_expired(utcnow()):
            raise InvalidResetToken("This password reset link is invalid or has expired")

        user = reset_token.user
        user.password_hash = hash_password(new_password)
        db.delete(reset_token)
        db.commit()

        logger.info(f"Password reset completed for user {user.id}")
        return user


user_service_obj = UserService()

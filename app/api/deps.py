"""
Dependency injection for API endpoints.
"""
from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.exceptions import NotAuthenticated
from app.models.user import User


def get_db() -> Generator:
    """
    Database dependency that ensures proper session cleanup.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Resolve the session cookie to a user.

    The cookie only carries the user id; anything that does not match a
    stored user is treated as logged out.
    """
    user_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not user_id:
        raise NotAuthenticated("You must be logged in")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotAuthenticated("You must be logged in")
    return user

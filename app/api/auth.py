"""
Registration, login and password reset endpoints.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.config import settings
from app.models.user import User
from app.schemas import user as user_schemas
from app.services.user_service import user_service_obj

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


def set_session_cookie(response: Response, user: User) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        user.id,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.COOKIE_MAX_AGE
    )


@router.post("/register", response_model=user_schemas.UserResponse)
def register(
        payload: user_schemas.UserCreate,
        response: Response,
        db: Session = Depends(get_db)
):
    """
    Create an account and log it in.

    The first account ever registered becomes the admin.
    """
    user = user_service_obj.register(db, payload.username, payload.email, payload.password)
    set_session_cookie(response, user)
    return user


@router.post("/login", response_model=user_schemas.UserResponse)
def login(
        payload: user_schemas.LoginRequest,
        response: Response,
        db: Session = Depends(get_db)
):
    """Log in with a username or an email address."""
    user = user_service_obj.authenticate(db, payload.identifier, payload.password)
    set_session_cookie(response, user)
    return user


@router.post("/logout", response_model=user_schemas.ActionResponse)
def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"success": True, "message": "Logged out"}


@router.get("/current", response_model=Optional[user_schemas.UserResponse])
def current_user(request: Request, db: Session = Depends(get_db)):
    """The logged-in user, or null when there is no valid session."""
    user_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not user_id:
        return None
    return db.query(User).filter(User.id == user_id).first()


@router.post("/forgot-password", response_model=user_schemas.ForgotPasswordResponse)
def forgot_password(
        payload: user_schemas.ForgotPasswordRequest,
        db: Session = Depends(get_db)
):
    """
    Start a password reset.

    The answer is the same whether or not the email is registered. The
    link itself is only returned when EXPOSE_RESET_LINK is enabled.
    """
    reset_link = user_service_obj.request_password_reset(db, payload.email)
    return {
        "success": True,
        "message": "If an account exists with that email, we've sent you a password reset link.",
        "reset_link": reset_link if settings.EXPOSE_RESET_LINK else None,
    }


@router.post("/reset-password", response_model=user_schemas.ActionResponse)
def reset_password(
        payload: user_schemas.ResetPasswordRequest,
        db: Session = Depends(get_db)
):
    user_service_obj.reset_password(db, payload.token, payload.password)
    return {"success": True, "message": "Password has been reset"}

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime

from app.models.user import UserRole


def _check_email(value: str) -> str:
    value = value.strip()
    local, _, domain = value.partition("@")
    if not local or "." not in domain:
        raise ValueError("Please enter a valid email address")
    return value


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=20, description="Unique username")
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=6)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return _check_email(v)


class LoginRequest(BaseModel):
    identifier: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    role: UserRole
    avatar_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicUser(BaseModel):
    id: str
    username: str
    avatar_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    username: str = Field(..., min_length=3, max_length=20)
    email: str = Field(..., max_length=255)
    avatar_url: Optional[str] = Field(None, max_length=500, description="Empty string clears the avatar")
    role: Optional[UserRole] = None
    password: Optional[str] = Field(None, min_length=6)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return _check_email(v)

    @field_validator("avatar_url")
    @classmethod
    def check_avatar_url(cls, v):
        if v is None or not v.strip():
            return v
        if not v.strip().startswith(("http://", "https://")):
            raise ValueError("Avatar URL must be a valid URL")
        return v.strip()


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., max_length=255)


class ForgotPasswordResponse(BaseModel):
    success: bool = True
    message: str
    reset_link: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)


class AchievementResponse(BaseModel):
    type: str
    unlocked_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserStatsResponse(BaseModel):
    user_id: str
    username: str
    total_games_played: int
    total_score_sum: int
    rank_by_game_count: Optional[int] = Field(None, description="Position by distinct games scored")
    achievements: List[AchievementResponse]


class ActionResponse(BaseModel):
    success: bool
    message: str

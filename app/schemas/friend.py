from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from app.models.friendship import FriendshipStatus
from app.schemas.user import PublicUser


class FriendRequestCreate(BaseModel):
    friend_id: UUID = Field(..., description="User to befriend")


class FriendRequestResponse(BaseModel):
    id: str
    user_id: str
    friend_id: str
    status: FriendshipStatus
    created_at: datetime
    user: Optional[PublicUser] = Field(None, description="Requester")

    model_config = ConfigDict(from_attributes=True)

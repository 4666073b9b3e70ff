"""
Pydantic schemas for friend requests, friendships and blocks.
"""
from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict

from app.models.relationship import RelationshipType, RelationshipStatus
from app.schemas.user import UserSummaryResponse


# ============================================================================
# Request Schemas
# ============================================================================

class FriendRequestCreate(BaseModel):
    """Schema for sending a friend request."""

    target_user_id: str = Field(..., min_length=1, description="User to befriend")


class FriendRequestRespond(BaseModel):
    """Schema for accepting or rejecting a friend request."""

    accept: bool = Field(..., description="True to accept, False to reject")


class BlockCreate(BaseModel):
    """Schema for blocking a user."""

    target_user_id: str = Field(..., min_length=1, description="User to block")


# ============================================================================
# Response Schemas
# ============================================================================

class RelationshipResponse(BaseModel):
    """A single directed relationship edge."""

    id: str
    user_id: str = Field(serialization_alias="userId")
    target_user_id: str = Field(serialization_alias="targetUserId")
    type: RelationshipType
    status: RelationshipStatus
    created_at: datetime = Field(serialization_alias="createdAt")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        ser_json_by_alias=True,
        json_schema_extra={
            "example": {
                "id": "9b1d0c3e5f7a4b2c8d6e0f1a2b3c4d5e",
                "userId": "1f2e3d4c5b6a79880f1e2d3c4b5a6978",
                "targetUserId": "a7b8c9d0e1f2a3b4c5d6e7f8a9b0c1d2",
                "type": "friend",
                "status": "pending",
                "createdAt": "2025-10-10T10:00:00Z"
            }
        }
    )


class PendingRequestResponse(BaseModel):
    """An incoming friend request with the requester's summary."""

    id: str
    created_at: datetime = Field(serialization_alias="createdAt")
    user: UserSummaryResponse

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

"""
Pydantic schemas for group requests and responses.
Handles validation for group and membership endpoints.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from app.models.group import GroupRole
from app.schemas.user import UserSummaryResponse


# ============================================================================
# Request Schemas
# ============================================================================

class GroupCreate(BaseModel):
    """Schema for creating a new group."""

    name: str = Field(..., min_length=1, max_length=255, description="Group name")
    description: Optional[str] = Field(None, max_length=2000, description="Group description")
    is_private: bool = Field(default=False, description="Hide the group from discovery")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Weekend Hikers",
                "description": "Trail plans and photos",
                "is_private": False
            }
        }


class GroupMemberAdd(BaseModel):
    """Schema for adding a member to a group."""

    user_id: str = Field(..., min_length=1, description="Friend to add")


# ============================================================================
# Response Schemas
# ============================================================================

class GroupResponse(BaseModel):
    """Group annotated with the caller's role and the live member count."""

    id: str
    name: str
    description: Optional[str] = None
    created_by: str = Field(serialization_alias="createdBy")
    is_private: bool = Field(serialization_alias="isPrivate")
    created_at: datetime = Field(serialization_alias="createdAt")
    role: GroupRole
    member_count: int = Field(serialization_alias="memberCount")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        ser_json_by_alias=True,
        json_schema_extra={
            "example": {
                "id": "123e4567e89b12d3a456426614174000",
                "name": "Weekend Hikers",
                "description": "Trail plans and photos",
                "createdBy": "123e4567e89b12d3a456426614174001",
                "isPrivate": False,
                "createdAt": "2025-10-10T10:00:00Z",
                "role": "admin",
                "memberCount": 3
            }
        }
    )


class GroupMemberResponse(BaseModel):
    """Roster entry."""

    user_id: str = Field(serialization_alias="userId")
    role: GroupRole
    joined_at: datetime = Field(serialization_alias="joinedAt")
    user: UserSummaryResponse

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class GroupMembershipResponse(BaseModel):
    """A membership row created by POST /groups/{id}/members."""

    group_id: str = Field(serialization_alias="groupId")
    user_id: str = Field(serialization_alias="userId")
    role: GroupRole
    joined_at: datetime = Field(serialization_alias="joinedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class SuccessResponse(BaseModel):
    """Generic acknowledgement for mutations without a body."""

    success: bool
    message: str

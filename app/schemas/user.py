"""
User schemas for API request/response validation.
"""
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


# ============================================================================
# Request Schemas
# ============================================================================

class ProfileUpdate(BaseModel):
    """Schema for updating the current user's profile."""

    nickname: Optional[str] = Field(None, max_length=100, description="Display nickname")
    profile_photo_key: Optional[str] = Field(
        None,
        max_length=500,
        description="Blob-store key returned by POST /files/upload-url"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "nickname": "alice",
                "profile_photo_key": "uploads/4f0c.../a1b2c3d4e5f60718_me.png"
            }
        }


# ============================================================================
# Response Schemas
# ============================================================================

class UserSummaryResponse(BaseModel):
    """Public view of a user (friend lists, rosters, search results)."""

    id: str
    name: Optional[str] = None
    nickname: Optional[str] = None
    email: Optional[str] = None
    profile_photo_url: Optional[str] = Field(None, serialization_alias="profilePhotoUrl")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        ser_json_by_alias=True
    )


class CurrentUserResponse(UserSummaryResponse):
    """The authenticated user, including the raw profile photo key."""

    profile_photo_key: Optional[str] = Field(None, serialization_alias="profilePhotoKey")

"""
Pydantic schemas for the client-side upload handshake.
"""
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class UploadUrlRequest(BaseModel):
    """Schema for requesting an upload target."""

    file_name: Optional[str] = Field(None, max_length=255, description="Original filename, kept in the key")


class UploadUrlResponse(BaseModel):
    """Signed PUT URL plus the key to hand back to the message/profile endpoints."""

    upload_url: str = Field(serialization_alias="uploadUrl")
    file_key: str = Field(serialization_alias="fileKey")

    model_config = ConfigDict(populate_by_name=True)

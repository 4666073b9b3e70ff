"""
Pydantic schemas for message requests and responses.
Handles validation for message-related API endpoints.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from app.models.message import MessageType


# ============================================================================
# Request Schemas
# ============================================================================

class MessageCreate(BaseModel):
    """
    Schema for sending a text message or a reply.

    Exactly one of group_id / recipient_id must be set.
    """

    content: str = Field(..., min_length=1, max_length=10000, description="Message text content")
    group_id: Optional[str] = Field(None, description="Target group")
    recipient_id: Optional[str] = Field(None, description="Direct message recipient")
    reply_to_id: Optional[str] = Field(None, description="ID of message being replied to")

    class Config:
        json_schema_extra = {
            "example": {
                "content": "See you at 9!",
                "group_id": "123e4567e89b12d3a456426614174000",
                "recipient_id": None,
                "reply_to_id": None
            }
        }


class FileMessageCreate(BaseModel):
    """Schema for sending a message that carries an uploaded file."""

    file_key: str = Field(..., min_length=1, max_length=500, description="Key returned by POST /files/upload-url")
    file_name: str = Field(..., min_length=1, max_length=255, description="Original filename")
    file_type: str = Field(..., min_length=1, max_length=100, description="MIME type, e.g. image/png")
    group_id: Optional[str] = Field(None, description="Target group")
    recipient_id: Optional[str] = Field(None, description="Direct message recipient")


class MessageUpdate(BaseModel):
    """Schema for editing a message."""

    content: str = Field(..., min_length=1, max_length=10000, description="Updated message content")


# ============================================================================
# Response Schemas
# ============================================================================

class MessageAuthor(BaseModel):
    """Author reference with the resolved display name."""

    id: str
    name: str


class ReplySnapshot(BaseModel):
    """Current state of the message being replied to."""

    id: str
    content: Optional[str] = None
    author: MessageAuthor


class MessageResponse(BaseModel):
    """Schema for an enriched message."""

    id: str
    author_id: str = Field(serialization_alias="authorId")
    author: MessageAuthor
    group_id: Optional[str] = Field(None, serialization_alias="groupId")
    recipient_id: Optional[str] = Field(None, serialization_alias="recipientId")
    type: MessageType
    content: Optional[str] = None
    file_name: Optional[str] = Field(None, serialization_alias="fileName")
    file_type: Optional[str] = Field(None, serialization_alias="fileType")
    file_url: Optional[str] = Field(None, serialization_alias="fileUrl")
    reply_to_id: Optional[str] = Field(None, serialization_alias="replyToId")
    reply_to: Optional[ReplySnapshot] = Field(None, serialization_alias="replyTo")
    is_deleted: bool = Field(serialization_alias="isDeleted")
    edited_at: Optional[datetime] = Field(None, serialization_alias="editedAt")
    created_at: datetime = Field(serialization_alias="createdAt")
    sequence_number: int = Field(
        ...,
        serialization_alias="sequenceNumber",
        description="Monotonically increasing insertion counter"
    )

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        ser_json_by_alias=True,  # camelCase for the frontend
        json_schema_extra={
            "example": {
                "id": "123e4567e89b12d3a456426614174000",
                "authorId": "123e4567e89b12d3a456426614174002",
                "author": {"id": "123e4567e89b12d3a456426614174002", "name": "alice"},
                "groupId": "123e4567e89b12d3a456426614174001",
                "recipientId": None,
                "type": "text",
                "content": "See you at 9!",
                "fileName": None,
                "fileType": None,
                "fileUrl": None,
                "replyToId": None,
                "replyTo": None,
                "isDeleted": False,
                "editedAt": None,
                "createdAt": "2025-10-10T10:00:00Z",
                "sequenceNumber": 42
            }
        }
    )

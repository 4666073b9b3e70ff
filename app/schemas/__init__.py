"""
Pydantic schema exports.
Provides request/response models for API endpoints.
"""
from app.schemas.user import (
    ProfileUpdate,
    UserSummaryResponse,
    CurrentUserResponse
)
from app.schemas.relationship import (
    FriendRequestCreate,
    FriendRequestRespond,
    BlockCreate,
    RelationshipResponse,
    PendingRequestResponse
)
from app.schemas.group import (
    GroupCreate,
    GroupMemberAdd,
    GroupResponse,
    GroupMemberResponse,
    GroupMembershipResponse,
    SuccessResponse
)
from app.schemas.message import (
    MessageCreate,
    FileMessageCreate,
    MessageUpdate,
    MessageAuthor,
    ReplySnapshot,
    MessageResponse
)
from app.schemas.file import (
    UploadUrlRequest,
    UploadUrlResponse
)

__all__ = [
    "ProfileUpdate",
    "UserSummaryResponse",
    "CurrentUserResponse",
    "FriendRequestCreate",
    "FriendRequestRespond",
    "BlockCreate",
    "RelationshipResponse",
    "PendingRequestResponse",
    "GroupCreate",
    "GroupMemberAdd",
    "GroupResponse",
    "GroupMemberResponse",
    "GroupMembershipResponse",
    "SuccessResponse",
    "MessageCreate",
    "FileMessageCreate",
    "MessageUpdate",
    "MessageAuthor",
    "ReplySnapshot",
    "MessageResponse",
    "UploadUrlRequest",
    "UploadUrlResponse",
]

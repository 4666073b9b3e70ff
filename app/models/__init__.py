"""
SQLAlchemy models for the chat application.

All models must be imported here for Alembic auto-generation to work.
"""

# Import Base first
from app.models.base import Base, IDMixin, CreatedAtMixin

# Import all models (order matters for relationships)
from app.models.user import User, UserProfile
from app.models.relationship import UserRelationship, RelationshipType, RelationshipStatus
from app.models.group import Group, GroupMember, GroupRole
from app.models.message import Message, MessageType

__all__ = [
    # Base classes
    "Base",
    "IDMixin",
    "CreatedAtMixin",
    # Users
    "User",
    "UserProfile",
    # Relationships
    "UserRelationship",
    "RelationshipType",
    "RelationshipStatus",
    # Groups
    "Group",
    "GroupMember",
    "GroupRole",
    # Messages
    "Message",
    "MessageType",
]

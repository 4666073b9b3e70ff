"""
Repository layer exports.
Provides database access layer for the application.
"""
from app.repositories.base import BaseRepository
from app.repositories.user_repo import UserRepository
from app.repositories.relationship_repo import RelationshipRepository
from app.repositories.group_repo import GroupRepository, GroupMemberRepository
from app.repositories.message_repo import MessageRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "RelationshipRepository",
    "GroupRepository",
    "GroupMemberRepository",
    "MessageRepository",
]

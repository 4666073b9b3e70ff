"""
Service layer exports.
Provides business logic for the application.
"""
from app.services.user_service import UserService
from app.services.relationship_service import RelationshipService
from app.services.group_service import GroupService
from app.services.message_service import MessageService
from app.services.storage_service import StorageService, storage_service

__all__ = [
    "UserService",
    "RelationshipService",
    "GroupService",
    "MessageService",
    "StorageService",
    "storage_service",
]

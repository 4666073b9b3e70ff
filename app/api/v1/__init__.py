"""
API v1 router exports.
Provides API endpoint routers.
"""
from app.api.v1 import users, friends, groups, messages, files

__all__ = [
    "users",
    "friends",
    "groups",
    "messages",
    "files",
]

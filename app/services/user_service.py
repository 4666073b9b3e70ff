"""
User service for identity sync, profiles, and user search.
"""
import logging
from typing import Optional, List, Dict, Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.services.storage_service import StorageService, storage_service

logger = logging.getLogger(__name__)

UNKNOWN_USER_NAME = "Unknown user"

SEARCH_RESULT_LIMIT = 10


def build_user_summary(user: User, storage: StorageService) -> Dict[str, Any]:
    """
    Public view of a user shared by friend lists, rosters and search.

    Args:
        user: User with profile loaded
        storage: Blob store used to sign the profile photo URL

    Returns:
        Dict with id, name, nickname, email and profile_photo_url
    """
    profile = user.profile
    return {
        "id": user.id,
        "name": user.name,
        "nickname": profile.nickname if profile else None,
        "email": user.email,
        "profile_photo_url": storage.get_file_url(profile.profile_photo_key) if profile else None,
    }


def resolve_display_name(user: Optional[User]) -> str:
    """Nickname, else real name, else a placeholder."""
    if user is None:
        return UNKNOWN_USER_NAME
    return user.display_name or UNKNOWN_USER_NAME


class UserService:
    """Service for user-related business logic."""

    def __init__(self, db: AsyncSession):
        """Initialize user service."""
        self.db = db
        self.user_repo = UserRepository(db)
        self.storage = storage_service

    async def get_or_create_from_identity(self, claims: Dict[str, Any]) -> User:
        """
        Resolve the local user for an authenticated identity.

        Creates the row on first sight and refreshes name/email when the
        identity provider reports new values.

        Args:
            claims: Decoded token claims

        Returns:
            Local user
        """
        existing = await self.user_repo.get_by_external_id(claims["subject"])
        user = await self.user_repo.upsert_from_identity(claims)
        await self.db.commit()

        if existing is None:
            logger.info(f"Created local user {user.id} for subject {claims['subject']}")
        return user

    async def get_user_or_404(self, user_id: str) -> User:
        """Load a user or raise NotFoundError."""
        users = await self.user_repo.get_many_with_profiles([user_id])
        user = users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def get_current_user(self, user_id: str) -> Dict[str, Any]:
        """
        Current user with profile fields.

        Args:
            user_id: Acting user

        Returns:
            User summary plus the raw profile photo key
        """
        user = await self.get_user_or_404(user_id)
        data = build_user_summary(user, self.storage)
        data["profile_photo_key"] = user.profile.profile_photo_key if user.profile else None
        return data

    async def update_profile(
        self,
        user_id: str,
        nickname: Optional[str] = None,
        profile_photo_key: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Update the caller's profile, creating it on first use.

        Fields left as None are not changed.

        Args:
            user_id: Acting user
            nickname: New nickname
            profile_photo_key: Blob-store key of an uploaded photo

        Returns:
            Updated current-user view

        Raises:
            InvalidArgumentError: If the nickname is blank
        """
        updates: Dict[str, Any] = {}
        if nickname is not None:
            nickname = nickname.strip()
            if not nickname:
                raise InvalidArgumentError("Nickname cannot be empty")
            updates["nickname"] = nickname
        if profile_photo_key is not None:
            updates["profile_photo_key"] = profile_photo_key

        await self.user_repo.upsert_profile(user_id, updates)
        await self.db.commit()

        logger.info(f"Profile updated for user {user_id}: {sorted(updates)}")
        return await self.get_current_user(user_id)

    async def search_users(self, user_id: str, query: str) -> List[Dict[str, Any]]:
        """
        Find users by exact nickname, never returning the caller.

        Args:
            user_id: Acting user
            query: Nickname to match

        Returns:
            Up to 10 user summaries

        Raises:
            InvalidArgumentError: If the query is blank
        """
        nickname = query.strip()
        if not nickname:
            raise InvalidArgumentError("Search query cannot be empty")

        users = await self.user_repo.search_by_nickname(
            nickname,
            exclude_user_id=user_id,
            limit=SEARCH_RESULT_LIMIT
        )
        return [build_user_summary(user, self.storage) for user in users]

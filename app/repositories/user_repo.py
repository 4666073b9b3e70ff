"""
User repository for database operations.
Handles user lookup, identity sync and profile storage.
"""
from typing import Optional, List, Dict, Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.user import User, UserProfile
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user database operations."""

    def __init__(self, db: AsyncSession):
        """Initialize user repository."""
        super().__init__(User, db)

    async def get_by_external_id(self, external_id: str) -> Optional[User]:
        """
        Get user by identity provider subject.

        Args:
            external_id: Subject claim

        Returns:
            User instance or None
        """
        result = await self.db.execute(
            select(User).where(User.external_id == external_id)
        )
        return result.scalar_one_or_none()

    async def upsert_from_identity(self, claims: Dict[str, Any]) -> User:
        """
        Insert or refresh the local user for an authenticated identity.

        Only ``name`` and ``email`` are synced, and only when the claims
        carry a value that differs from what is stored.

        Args:
            claims: Decoded identity claims (``subject``, ``name``, ``email``)

        Returns:
            The local user
        """
        user = await self.get_by_external_id(claims["subject"])

        if user is None:
            user = User(
                external_id=claims["subject"],
                name=claims.get("name"),
                email=claims.get("email"),
            )
            self.db.add(user)
            await self.db.flush()
            await self.db.refresh(user)
            return user

        changed = False
        for field in ("name", "email"):
            value = claims.get(field)
            if value and getattr(user, field) != value:
                setattr(user, field, value)
                changed = True

        if changed:
            await self.db.flush()
        return user

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Get the profile row for a user, if one was ever created."""
        result = await self.db.execute(
            select(UserProfile).where(UserProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def upsert_profile(self, user_id: str, updates: Dict[str, Any]) -> UserProfile:
        """
        Create the profile on first use, otherwise patch the given fields.

        Args:
            user_id: Owning user
            updates: Fields to set (only keys present are changed)

        Returns:
            The profile
        """
        profile = await self.get_profile(user_id)

        if profile is None:
            profile = UserProfile(user_id=user_id, **updates)
            self.db.add(profile)
        else:
            for key, value in updates.items():
                setattr(profile, key, value)

        await self.db.flush()
        await self.db.refresh(profile)
        return profile

    async def get_many_with_profiles(self, ids: List[str]) -> Dict[str, User]:
        """
        Load users with their profiles, keyed by ID.

        Args:
            ids: User IDs (duplicates allowed)

        Returns:
            Mapping of user ID to User; unknown IDs are absent
        """
        unique_ids = list(set(ids))
        if not unique_ids:
            return {}

        result = await self.db.execute(
            select(User)
            .where(User.id.in_(unique_ids))
            .options(selectinload(User.profile))
            .execution_options(populate_existing=True)
        )
        return {user.id: user for user in result.scalars().all()}

    async def search_by_nickname(
        self,
        nickname: str,
        exclude_user_id: str,
        limit: int = 10
    ) -> List[User]:
        """
        Exact nickname match, excluding one user (the caller).

        Args:
            nickname: Nickname to match exactly
            exclude_user_id: User to leave out of the results
            limit: Maximum results

        Returns:
            Matching users with profiles loaded
        """
        result = await self.db.execute(
            select(User)
            .join(UserProfile, UserProfile.user_id == User.id)
            .where(
                UserProfile.nickname == nickname,
                User.id != exclude_user_id,
            )
            .options(selectinload(User.profile))
            .execution_options(populate_existing=True)
            .order_by(User.created_at)
            .limit(limit)
        )
        return list(result.scalars().all())

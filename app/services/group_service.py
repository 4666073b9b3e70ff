"""
Group service containing business logic for groups and memberships.
Handles group creation, roster management and admin authorization.
"""
import logging
from typing import List, Optional, Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)
from app.core.websocket import connection_manager
from app.models.group import Group, GroupMember, GroupRole
from app.repositories.group_repo import GroupRepository, GroupMemberRepository
from app.repositories.relationship_repo import RelationshipRepository
from app.repositories.user_repo import UserRepository
from app.services.relationship_service import RelationshipService
from app.services.storage_service import storage_service
from app.services.user_service import build_user_summary
from app.utils.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)


def group_to_dict(group: Group) -> Dict[str, Any]:
    return {
        "id": group.id,
        "name": group.name,
        "description": group.description,
        "created_by": group.created_by,
        "is_private": group.is_private,
        "created_at": ensure_utc(group.created_at),
    }


class GroupService:
    """Service for group operations with business logic."""

    def __init__(self, db: AsyncSession):
        """
        Initialize group service.

        Args:
            db: Database session
        """
        self.db = db
        self.group_repo = GroupRepository(db)
        self.member_repo = GroupMemberRepository(db)
        self.relationship_repo = RelationshipRepository(db)
        self.user_repo = UserRepository(db)
        self.relationships = RelationshipService(db)
        self.storage = storage_service
        self.ws_manager = connection_manager

    async def _get_group_or_404(self, group_id: str) -> Group:
        group = await self.group_repo.get(group_id)
        if not group:
            raise NotFoundError("Group not found")
        return group

    async def _ensure_admin(self, group_id: str, user_id: str) -> None:
        if not await self.member_repo.is_admin(group_id, user_id):
            raise ForbiddenError("Only group admins can manage members")

    async def _ensure_member(self, group_id: str, user_id: str) -> None:
        if not await self.member_repo.is_member(group_id, user_id):
            raise ForbiddenError("You are not a member of this group")

    async def _broadcast(self, group_id: str, user_ids: List[str]) -> None:
        try:
            await self.ws_manager.notify_groups_changed(group_id, user_ids)
        except Exception as e:
            logger.warning(f"Group change broadcast failed for {group_id}: {type(e).__name__}: {e}")

    async def _evict(self, group_id: str, user_id: str) -> None:
        try:
            await self.ws_manager.evict_from_group(group_id, user_id)
        except Exception as e:
            logger.warning(f"Room eviction failed for {user_id} in {group_id}: {type(e).__name__}: {e}")

    async def is_member(self, group_id: str, user_id: str) -> bool:
        return await self.member_repo.is_member(group_id, user_id)

    async def is_admin(self, group_id: str, user_id: str) -> bool:
        return await self.member_repo.is_admin(group_id, user_id)

    async def member_count(self, group_id: str) -> int:
        return await self.member_repo.get_member_count(group_id)

    async def create_group(
        self,
        creator_id: str,
        name: str,
        description: Optional[str] = None,
        is_private: bool = False
    ) -> Dict[str, Any]:
        """
        Create a group with the creator as its first admin.

        Both rows are committed together; a failure leaves neither.

        Args:
            creator_id: Creating user
            name: Group name
            description: Optional description
            is_private: Privacy flag

        Returns:
            Group dict with the creator's role and member count

        Raises:
            InvalidArgumentError: Blank name
        """
        name = (name or "").strip()
        if not name:
            raise InvalidArgumentError("Group name cannot be empty")

        group = await self.group_repo.create_with_admin(
            creator_id=creator_id,
            name=name,
            description=description,
            is_private=is_private
        )
        await self.db.commit()

        logger.info(f"Group {group.id} created by {creator_id}")
        await self._broadcast(group.id, [creator_id])

        data = group_to_dict(group)
        data["role"] = GroupRole.ADMIN
        data["member_count"] = 1
        return data

    async def get_group(self, user_id: str, group_id: str) -> Dict[str, Any]:
        """
        Group detail for one of its members.

        Raises:
            NotFoundError: Unknown group
            ForbiddenError: Caller is not a member
        """
        group = await self._get_group_or_404(group_id)
        member = await self.member_repo.get_member(group_id, user_id)
        if member is None:
            raise ForbiddenError("You are not a member of this group")

        data = group_to_dict(group)
        data["role"] = member.role
        data["member_count"] = await self.member_repo.get_member_count(group_id)
        return data

    async def add_member(self, actor_id: str, group_id: str, user_id: str) -> Dict[str, Any]:
        """
        Add a friend of the acting admin to the group.

        Args:
            actor_id: Acting user (must be admin)
            group_id: Target group
            user_id: User to add (must be the actor's friend)

        Returns:
            The new membership

        Raises:
            NotFoundError: Unknown group
            ForbiddenError: Actor is not admin, or user is not the actor's friend
            ConflictError: User is already a member
        """
        await self._get_group_or_404(group_id)
        await self._ensure_admin(group_id, actor_id)

        if await self.member_repo.is_member(group_id, user_id):
            raise ConflictError("User is already a member of this group")

        if not await self.relationships.is_friend(actor_id, user_id):
            raise ForbiddenError("You can only add your friends to a group")

        try:
            member = await self.member_repo.add_member(group_id, user_id, GroupRole.MEMBER)
            await self.db.commit()
        except IntegrityError:
            # Concurrent add of the same pair
            await self.db.rollback()
            raise ConflictError("User is already a member of this group")

        logger.info(f"User {user_id} added to group {group_id} by {actor_id}")
        await self._broadcast(group_id, await self.member_repo.get_member_ids(group_id))

        return {
            "group_id": member.group_id,
            "user_id": member.user_id,
            "role": member.role,
            "joined_at": ensure_utc(member.joined_at),
        }

    async def remove_member(self, actor_id: str, group_id: str, user_id: str) -> None:
        """
        Remove a member. The creator can never be removed.

        Raises:
            NotFoundError: Unknown group, or user is not a member
            ForbiddenError: Actor is not admin, or target is the creator
        """
        group = await self._get_group_or_404(group_id)
        await self._ensure_admin(group_id, actor_id)

        if not await self.member_repo.is_member(group_id, user_id):
            raise NotFoundError("User is not a member of this group")

        if user_id == group.created_by:
            raise ForbiddenError("The group creator cannot be removed")

        await self.member_repo.remove_member(group_id, user_id)
        await self.db.commit()

        logger.info(f"User {user_id} removed from group {group_id} by {actor_id}")
        await self._evict(group_id, user_id)
        remaining = await self.member_repo.get_member_ids(group_id)
        await self._broadcast(group_id, remaining + [user_id])

    async def leave_group(self, user_id: str, group_id: str) -> None:
        """
        Leave a group. The creator cannot leave.

        Raises:
            NotFoundError: Unknown group, or caller is not a member
            ForbiddenError: Caller is the creator
        """
        group = await self._get_group_or_404(group_id)

        if not await self.member_repo.is_member(group_id, user_id):
            raise NotFoundError("You are not a member of this group")

        if user_id == group.created_by:
            raise ForbiddenError("The group creator cannot leave the group")

        await self.member_repo.remove_member(group_id, user_id)
        await self.db.commit()

        logger.info(f"User {user_id} left group {group_id}")
        await self._evict(group_id, user_id)
        remaining = await self.member_repo.get_member_ids(group_id)
        await self._broadcast(group_id, remaining + [user_id])

    async def list_members(self, user_id: str, group_id: str) -> List[Dict[str, Any]]:
        """
        Group roster, visible to members only.

        Returns:
            List of ``{"user_id", "role", "joined_at", "user"}`` in join order
        """
        await self._get_group_or_404(group_id)
        await self._ensure_member(group_id, user_id)

        members = await self.member_repo.get_members(group_id)
        return [self._member_to_dict(member) for member in members]

    def _member_to_dict(self, member: GroupMember) -> Dict[str, Any]:
        return {
            "user_id": member.user_id,
            "role": member.role,
            "joined_at": ensure_utc(member.joined_at),
            "user": build_user_summary(member.user, self.storage),
        }

    async def list_user_groups(self, user_id: str) -> List[Dict[str, Any]]:
        """Groups the user belongs to, each with the user's role and member count."""
        rows = await self.group_repo.get_user_groups(user_id)

        groups = []
        for group, role, member_count in rows:
            data = group_to_dict(group)
            data["role"] = role
            data["member_count"] = member_count
            groups.append(data)
        return groups

    async def list_addable_friends(self, actor_id: str, group_id: str) -> List[Dict[str, Any]]:
        """
        The actor's friends who are not yet in the group.

        Raises:
            NotFoundError: Unknown group
            ForbiddenError: Actor is not a member
        """
        await self._get_group_or_404(group_id)
        await self._ensure_member(group_id, actor_id)

        friend_ids = await self.relationship_repo.list_friend_ids(actor_id)
        member_ids = set(await self.member_repo.get_member_ids(group_id))
        candidate_ids = [fid for fid in friend_ids if fid not in member_ids]

        users = await self.user_repo.get_many_with_profiles(candidate_ids)
        return [
            build_user_summary(users[uid], self.storage)
            for uid in candidate_ids
            if uid in users
        ]

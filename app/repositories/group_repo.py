"""
Group repository for database operations.
Handles groups, memberships, and roster queries.
"""
from typing import Optional, List, Tuple

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.group import Group, GroupMember, GroupRole
from app.models.user import User
from app.repositories.base import BaseRepository
from app.utils.datetime_utils import utc_now


class GroupRepository(BaseRepository[Group]):
    """Repository for group database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Group, db)

    async def create_with_admin(
        self,
        creator_id: str,
        name: str,
        description: Optional[str] = None,
        is_private: bool = False
    ) -> Group:
        """
        Create a group and its creator's admin membership in one flush.

        The caller commits; nothing is visible until both rows are written.

        Args:
            creator_id: Creator user ID
            name: Group name
            description: Optional description
            is_private: Privacy flag

        Returns:
            Created group
        """
        group = Group(
            name=name,
            description=description,
            created_by=creator_id,
            is_private=is_private
        )
        self.db.add(group)
        await self.db.flush()

        creator_member = GroupMember(
            group_id=group.id,
            user_id=creator_id,
            role=GroupRole.ADMIN,
            joined_at=utc_now()
        )
        self.db.add(creator_member)

        await self.db.flush()
        await self.db.refresh(group)
        return group

    async def get_user_groups(self, user_id: str) -> List[Tuple[Group, GroupRole, int]]:
        """
        Groups the user belongs to, with the user's role and the live member count.

        Args:
            user_id: User ID

        Returns:
            List of (group, role, member_count), oldest membership first
        """
        member_count = (
            select(func.count())
            .select_from(GroupMember)
            .where(GroupMember.group_id == Group.id)
            .correlate(Group)
            .scalar_subquery()
        )

        result = await self.db.execute(
            select(Group, GroupMember.role, member_count.label("member_count"))
            .join(GroupMember, GroupMember.group_id == Group.id)
            .where(GroupMember.user_id == user_id)
            .order_by(GroupMember.joined_at)
        )
        return [(row[0], row[1], row[2]) for row in result.all()]


class GroupMemberRepository:
    """Repository for group membership operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_member(self, group_id: str, user_id: str) -> Optional[GroupMember]:
        """
        Get membership record.

        Args:
            group_id: Group ID
            user_id: User ID

        Returns:
            GroupMember or None
        """
        result = await self.db.execute(
            select(GroupMember).where(
                GroupMember.group_id == group_id,
                GroupMember.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def is_member(self, group_id: str, user_id: str) -> bool:
        """Check if user is a member of the group."""
        return await self.get_member(group_id, user_id) is not None

    async def is_admin(self, group_id: str, user_id: str) -> bool:
        """Check if user holds the admin role in the group."""
        member = await self.get_member(group_id, user_id)
        return member is not None and member.role == GroupRole.ADMIN

    async def get_members(self, group_id: str) -> List[GroupMember]:
        """
        Get all members of a group with their users loaded.

        Args:
            group_id: Group ID

        Returns:
            Members, in join order
        """
        result = await self.db.execute(
            select(GroupMember)
            .where(GroupMember.group_id == group_id)
            .options(selectinload(GroupMember.user).selectinload(User.profile))
            .order_by(GroupMember.joined_at)
        )
        return list(result.scalars().all())

    async def get_member_ids(self, group_id: str) -> List[str]:
        """IDs of every member of the group."""
        result = await self.db.execute(
            select(GroupMember.user_id).where(GroupMember.group_id == group_id)
        )
        return list(result.scalars().all())

    async def get_member_count(self, group_id: str) -> int:
        """Get total member count for a group."""
        result = await self.db.execute(
            select(func.count())
            .select_from(GroupMember)
            .where(GroupMember.group_id == group_id)
        )
        return result.scalar()

    async def add_member(
        self,
        group_id: str,
        user_id: str,
        role: GroupRole = GroupRole.MEMBER
    ) -> GroupMember:
        """
        Insert a membership row.

        Raises:
            sqlalchemy.exc.IntegrityError: If the pair already exists
        """
        member = GroupMember(
            group_id=group_id,
            user_id=user_id,
            role=role,
            joined_at=utc_now()
        )
        self.db.add(member)
        await self.db.flush()
        return member

    async def remove_member(self, group_id: str, user_id: str) -> bool:
        """
        Remove member from a group.

        Returns:
            True if removed, False if not found
        """
        result = await self.db.execute(
            delete(GroupMember).where(
                GroupMember.group_id == group_id,
                GroupMember.user_id == user_id
            )
        )
        await self.db.flush()
        return result.rowcount > 0

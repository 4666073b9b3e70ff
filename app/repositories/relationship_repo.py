"""
Relationship repository for database operations.
Handles directed friend and block edges between users.
"""
from typing import Optional, List

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.relationship import UserRelationship, RelationshipType, RelationshipStatus
from app.repositories.base import BaseRepository


class RelationshipRepository(BaseRepository[UserRelationship]):
    """Repository for user relationship edges."""

    def __init__(self, db: AsyncSession):
        super().__init__(UserRelationship, db)

    async def find_edge(
        self,
        user_id: str,
        target_user_id: str,
        type: Optional[RelationshipType] = None,
        statuses: Optional[List[RelationshipStatus]] = None
    ) -> Optional[UserRelationship]:
        """
        Find the first edge user_id -> target_user_id.

        Args:
            user_id: Edge owner
            target_user_id: Edge target
            type: Optional kind filter
            statuses: Optional status filter

        Returns:
            Matching edge or None
        """
        query = select(UserRelationship).where(
            UserRelationship.user_id == user_id,
            UserRelationship.target_user_id == target_user_id,
        )
        if type is not None:
            query = query.where(UserRelationship.type == type)
        if statuses:
            query = query.where(UserRelationship.status.in_(statuses))

        result = await self.db.execute(query.order_by(UserRelationship.created_at).limit(1))
        return result.scalar_one_or_none()

    async def edge_exists(
        self,
        user_id: str,
        target_user_id: str,
        type: RelationshipType,
        status: Optional[RelationshipStatus] = None
    ) -> bool:
        """Check whether at least one matching edge exists."""
        query = (
            select(func.count())
            .select_from(UserRelationship)
            .where(
                UserRelationship.user_id == user_id,
                UserRelationship.target_user_id == target_user_id,
                UserRelationship.type == type,
            )
        )
        if status is not None:
            query = query.where(UserRelationship.status == status)

        result = await self.db.execute(query)
        return result.scalar() > 0

    async def delete_edges(
        self,
        user_id: str,
        target_user_id: str,
        type: Optional[RelationshipType] = None
    ) -> int:
        """
        Delete every edge user_id -> target_user_id (optionally of one kind).

        Returns:
            Number of edges removed
        """
        stmt = delete(UserRelationship).where(
            UserRelationship.user_id == user_id,
            UserRelationship.target_user_id == target_user_id,
        )
        if type is not None:
            stmt = stmt.where(UserRelationship.type == type)

        result = await self.db.execute(stmt)
        await self.db.flush()
        return result.rowcount

    async def list_outgoing(
        self,
        user_id: str,
        type: RelationshipType,
        status: Optional[RelationshipStatus] = None
    ) -> List[UserRelationship]:
        """Edges owned by user_id, oldest first."""
        query = select(UserRelationship).where(
            UserRelationship.user_id == user_id,
            UserRelationship.type == type,
        )
        if status is not None:
            query = query.where(UserRelationship.status == status)

        result = await self.db.execute(query.order_by(UserRelationship.created_at))
        return list(result.scalars().all())

    async def list_incoming(
        self,
        target_user_id: str,
        type: RelationshipType,
        status: Optional[RelationshipStatus] = None
    ) -> List[UserRelationship]:
        """Edges pointing at target_user_id, oldest first."""
        query = select(UserRelationship).where(
            UserRelationship.target_user_id == target_user_id,
            UserRelationship.type == type,
        )
        if status is not None:
            query = query.where(UserRelationship.status == status)

        result = await self.db.execute(query.order_by(UserRelationship.created_at))
        return list(result.scalars().all())

    async def list_friend_ids(self, user_id: str) -> List[str]:
        """Targets of accepted outbound friend edges (deduplicated, stable order)."""
        edges = await self.list_outgoing(
            user_id, RelationshipType.FRIEND, RelationshipStatus.ACCEPTED
        )
        return list(dict.fromkeys(edge.target_user_id for edge in edges))

    async def update_status(
        self,
        edge: UserRelationship,
        status: RelationshipStatus
    ) -> UserRelationship:
        """Set an edge's status."""
        edge.status = status
        await self.db.flush()
        await self.db.refresh(edge)
        return edge

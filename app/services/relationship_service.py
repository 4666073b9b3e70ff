"""
Relationship service containing business logic for friends and blocks.

Friendship is stored as two reciprocal accepted friend edges; a pending
request is one edge from requester to target. Blocks are one-directional:
only the blocker's outbound edge changes.
"""
import logging
from typing import List, Dict, Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)
from app.core.websocket import connection_manager
from app.models.relationship import UserRelationship, RelationshipType, RelationshipStatus
from app.repositories.relationship_repo import RelationshipRepository
from app.repositories.user_repo import UserRepository
from app.services.storage_service import storage_service
from app.services.user_service import build_user_summary
from app.utils.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)


def relationship_to_dict(edge: UserRelationship) -> Dict[str, Any]:
    return {
        "id": edge.id,
        "user_id": edge.user_id,
        "target_user_id": edge.target_user_id,
        "type": edge.type,
        "status": edge.status,
        "created_at": ensure_utc(edge.created_at),
    }


class RelationshipService:
    """Service for friend requests, friendships and blocks."""

    def __init__(self, db: AsyncSession):
        """
        Initialize relationship service.

        Args:
            db: Database session
        """
        self.db = db
        self.relationship_repo = RelationshipRepository(db)
        self.user_repo = UserRepository(db)
        self.storage = storage_service
        self.ws_manager = connection_manager

    async def _ensure_other_user(self, user_id: str, target_user_id: str, action: str) -> None:
        if user_id == target_user_id:
            raise InvalidArgumentError(f"You cannot {action} yourself")
        if not await self.user_repo.exists(target_user_id):
            raise NotFoundError("User not found")

    async def _broadcast(self, *user_ids: str) -> None:
        try:
            await self.ws_manager.notify_relationships_changed(user_ids)
        except Exception as e:
            logger.warning(f"Relationship change broadcast failed: {type(e).__name__}: {e}")

    async def is_friend(self, user_id: str, other_user_id: str) -> bool:
        """
        Directional friendship check: an accepted friend edge user_id -> other_user_id exists.
        """
        return await self.relationship_repo.edge_exists(
            user_id,
            other_user_id,
            RelationshipType.FRIEND,
            RelationshipStatus.ACCEPTED
        )

    async def is_blocked_by(self, blocker_id: str, blocked_id: str) -> bool:
        """True if blocker_id has blocked blocked_id."""
        return await self.relationship_repo.edge_exists(
            blocker_id,
            blocked_id,
            RelationshipType.BLOCKED
        )

    async def send_friend_request(self, user_id: str, target_user_id: str) -> Dict[str, Any]:
        """
        Send a friend request.

        A second request while one is pending, or once the two are already
        friends, is rejected. A rejected request may be re-sent.

        Args:
            user_id: Requesting user
            target_user_id: User to befriend

        Returns:
            The pending edge

        Raises:
            InvalidArgumentError: Request to oneself
            NotFoundError: Unknown target
            ConflictError: Pending or accepted request already exists
        """
        await self._ensure_other_user(user_id, target_user_id, "send a friend request to")

        existing = await self.relationship_repo.find_edge(
            user_id,
            target_user_id,
            type=RelationshipType.FRIEND,
            statuses=[RelationshipStatus.PENDING, RelationshipStatus.ACCEPTED]
        )
        if existing:
            if existing.status == RelationshipStatus.ACCEPTED:
                raise ConflictError("You are already friends with this user")
            raise ConflictError("Friend request already sent")

        edge = await self.relationship_repo.create(
            user_id=user_id,
            target_user_id=target_user_id,
            type=RelationshipType.FRIEND,
            status=RelationshipStatus.PENDING
        )
        await self.db.commit()

        logger.info(f"Friend request {edge.id}: {user_id} -> {target_user_id}")
        await self._broadcast(user_id, target_user_id)
        return relationship_to_dict(edge)

    async def respond_to_friend_request(
        self,
        user_id: str,
        relationship_id: str,
        accept: bool
    ) -> Dict[str, Any]:
        """
        Accept or reject an incoming friend request.

        Accepting marks the edge accepted and inserts the reciprocal accepted
        edge in the same transaction. Rejecting is terminal.

        Args:
            user_id: Acting user (must be the request's target)
            relationship_id: Pending edge ID
            accept: True to accept, False to reject

        Returns:
            The updated edge

        Raises:
            NotFoundError: Edge does not exist
            ForbiddenError: Caller is not the request's target
            InvalidArgumentError: Edge is not a pending friend request
        """
        edge = await self.relationship_repo.get(relationship_id)
        if not edge:
            raise NotFoundError("Friend request not found")

        if edge.target_user_id != user_id:
            raise ForbiddenError("Unauthorized: this friend request is not addressed to you")

        if edge.type != RelationshipType.FRIEND or edge.status != RelationshipStatus.PENDING:
            raise InvalidArgumentError("Friend request is no longer pending")

        requester_id = edge.user_id

        if accept:
            edge = await self.relationship_repo.update_status(edge, RelationshipStatus.ACCEPTED)

            # A crossed request from this side collapses into the reciprocal edge
            await self.relationship_repo.delete_edges(
                user_id, requester_id, type=RelationshipType.FRIEND
            )
            await self.relationship_repo.create(
                user_id=user_id,
                target_user_id=requester_id,
                type=RelationshipType.FRIEND,
                status=RelationshipStatus.ACCEPTED
            )
        else:
            edge = await self.relationship_repo.update_status(edge, RelationshipStatus.REJECTED)

        await self.db.commit()

        logger.info(
            f"Friend request {relationship_id} {'accepted' if accept else 'rejected'} by {user_id}"
        )
        await self._broadcast(user_id, requester_id)
        return relationship_to_dict(edge)

    async def block_user(self, user_id: str, target_user_id: str) -> Dict[str, Any]:
        """
        Block a user.

        Replaces every existing edge user_id -> target_user_id with a single
        block edge. The reverse edge is left untouched.

        Args:
            user_id: Blocking user
            target_user_id: User to block

        Returns:
            The block edge
        """
        await self._ensure_other_user(user_id, target_user_id, "block")

        removed = await self.relationship_repo.delete_edges(user_id, target_user_id)
        edge = await self.relationship_repo.create(
            user_id=user_id,
            target_user_id=target_user_id,
            type=RelationshipType.BLOCKED,
            status=RelationshipStatus.ACCEPTED
        )
        await self.db.commit()

        logger.info(f"User {user_id} blocked {target_user_id} (replaced {removed} edges)")
        await self._broadcast(user_id, target_user_id)
        return relationship_to_dict(edge)

    async def _summaries(self, user_ids: List[str]) -> List[Dict[str, Any]]:
        users = await self.user_repo.get_many_with_profiles(user_ids)
        return [
            build_user_summary(users[uid], self.storage)
            for uid in user_ids
            if uid in users
        ]

    async def list_friends(self, user_id: str) -> List[Dict[str, Any]]:
        """Users the caller has an accepted friend edge to."""
        friend_ids = await self.relationship_repo.list_friend_ids(user_id)
        return await self._summaries(friend_ids)

    async def list_pending_requests(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Incoming pending friend requests.

        Returns:
            List of ``{"id", "created_at", "user"}`` where user is the requester
        """
        edges = await self.relationship_repo.list_incoming(
            user_id, RelationshipType.FRIEND, RelationshipStatus.PENDING
        )
        users = await self.user_repo.get_many_with_profiles([edge.user_id for edge in edges])

        return [
            {
                "id": edge.id,
                "created_at": ensure_utc(edge.created_at),
                "user": build_user_summary(users[edge.user_id], self.storage),
            }
            for edge in edges
            if edge.user_id in users
        ]

    async def list_blocked_users(self, user_id: str) -> List[Dict[str, Any]]:
        """Users the caller has blocked."""
        edges = await self.relationship_repo.list_outgoing(user_id, RelationshipType.BLOCKED)
        blocked_ids = list(dict.fromkeys(edge.target_user_id for edge in edges))
        return await self._summaries(blocked_ids)

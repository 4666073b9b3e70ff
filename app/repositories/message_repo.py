"""
Message repository for database operations.
Handles message creation, feed queries, edits and soft deletes.
"""
from typing import List

from sqlalchemy import select, and_, or_, func, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.message import Message
from app.repositories.base import BaseRepository
from app.utils.datetime_utils import utc_now


class MessageRepository(BaseRepository[Message]):
    """Repository for message database operations."""

    def __init__(self, db: AsyncSession):
        """Initialize message repository."""
        super().__init__(Message, db)

    async def _next_sequence_number(self) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.max(Message.sequence_number), 0))
        )
        return result.scalar() + 1

    async def create_message(self, **kwargs) -> Message:
        """
        Insert a message stamped with the next sequence number.

        Args:
            **kwargs: Message field values

        Returns:
            Created message
        """
        sequence_number = await self._next_sequence_number()
        return await self.create(sequence_number=sequence_number, **kwargs)

    async def get_group_messages(self, group_id: str, limit: int = 50) -> List[Message]:
        """
        Most recent messages in a group, newest first.

        Args:
            group_id: Group ID
            limit: Maximum messages to return

        Returns:
            Messages ordered by descending sequence number
        """
        result = await self.db.execute(
            select(Message)
            .where(Message.group_id == group_id)
            .order_by(desc(Message.sequence_number))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_direct_messages(
        self,
        user_id: str,
        other_user_id: str,
        limit: int = 50
    ) -> List[Message]:
        """
        Most recent direct messages exchanged by a pair, newest first.

        Args:
            user_id: One side of the pair
            other_user_id: The other side
            limit: Maximum messages to return

        Returns:
            Messages ordered by descending sequence number
        """
        result = await self.db.execute(
            select(Message)
            .where(
                or_(
                    and_(Message.author_id == user_id, Message.recipient_id == other_user_id),
                    and_(Message.author_id == other_user_id, Message.recipient_id == user_id),
                )
            )
            .order_by(desc(Message.sequence_number))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def update_content(self, message: Message, content: str) -> Message:
        """Replace message content and stamp edited_at."""
        message.content = content
        message.edited_at = utc_now()
        await self.db.flush()
        await self.db.refresh(message)
        return message

    async def soft_delete(self, message: Message) -> Message:
        """
        Mark a message deleted and clear its body and attachment.

        The row is kept so reply references and ordering stay stable.
        """
        message.is_deleted = True
        message.content = None
        message.file_key = None
        message.file_name = None
        message.file_type = None
        await self.db.flush()
        await self.db.refresh(message)
        return message


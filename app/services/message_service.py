"""
Message service containing business logic for message operations.

Handles sending (text, reply and file), editing, soft deletion and the two
feed queries. Feeds are enriched at read time: author display names and reply
snapshots always reflect the current state of the referenced rows.
"""
import logging
from typing import List, Optional, Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
from app.core.websocket import connection_manager
from app.models.message import Message, MessageType, EDITABLE_MESSAGE_TYPES
from app.repositories.group_repo import GroupMemberRepository
from app.repositories.message_repo import MessageRepository
from app.repositories.user_repo import UserRepository
from app.services.relationship_service import RelationshipService
from app.services.storage_service import storage_service
from app.services.user_service import resolve_display_name
from app.utils.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)

SEQUENCE_RETRIES = 3


def _same_channel(message: Message, group_id: Optional[str], author_id: str, recipient_id: Optional[str]) -> bool:
    if group_id:
        return message.group_id == group_id
    if message.group_id:
        return False
    return {message.author_id, message.recipient_id} == {author_id, recipient_id}


class MessageService:
    """Service for message operations with business logic."""

    def __init__(self, db: AsyncSession):
        """
        Initialize message service.

        Args:
            db: Database session
        """
        self.db = db
        self.message_repo = MessageRepository(db)
        self.member_repo = GroupMemberRepository(db)
        self.user_repo = UserRepository(db)
        self.relationships = RelationshipService(db)
        self.storage = storage_service
        self.ws_manager = connection_manager

    async def _ensure_can_post(
        self,
        author_id: str,
        group_id: Optional[str],
        recipient_id: Optional[str]
    ) -> None:
        if bool(group_id) == bool(recipient_id):
            raise InvalidArgumentError("Exactly one of group_id or recipient_id is required")

        if group_id:
            if not await self.member_repo.is_member(group_id, author_id):
                raise ForbiddenError("You are not a member of this group")
            return

        if not await self.user_repo.exists(recipient_id):
            raise NotFoundError("Recipient not found")

        if await self.relationships.is_blocked_by(recipient_id, author_id):
            raise ForbiddenError("You cannot message this user")

    async def _insert_message(self, **fields) -> Message:
        """
        Insert and commit a message.

        Concurrent sends can read the same next sequence number; the unique
        index rejects the loser, which rolls back and draws a fresh number.
        Only reads precede the insert, so the rollback discards nothing.
        """
        for attempt in range(1, SEQUENCE_RETRIES + 1):
            try:
                message = await self.message_repo.create_message(**fields)
                await self.db.commit()
                return message
            except IntegrityError:
                await self.db.rollback()
                logger.warning(f"Sequence number collision, attempt {attempt}/{SEQUENCE_RETRIES}")

        raise ConflictError("Message could not be ordered, please retry")

    async def _broadcast(self, message: Message, action: str) -> None:
        try:
            if message.group_id:
                await self.ws_manager.notify_group_messages_changed(
                    message.group_id, message.id, action
                )
            else:
                await self.ws_manager.notify_direct_messages_changed(
                    message.author_id, message.recipient_id, message.id, action
                )
        except Exception as e:
            # The write is already committed
            logger.error(f"Message broadcast failed for {message.id}: {type(e).__name__}: {e}")

    async def _get_own_message(self, user_id: str, message_id: str) -> Message:
        message = await self.message_repo.get(message_id)
        if not message:
            raise NotFoundError("Message not found")
        if message.author_id != user_id:
            raise ForbiddenError("You can only modify your own messages")
        return message

    async def _enrich_messages(self, messages: List[Message]) -> List[Dict[str, Any]]:
        """
        Attach author names, signed file URLs and reply snapshots.

        Authors and reply targets are loaded in two batched queries rather
        than per message.
        """
        reply_ids = [m.reply_to_id for m in messages if m.reply_to_id]
        reply_targets = {m.id: m for m in await self.message_repo.get_many(list(set(reply_ids)))}

        author_ids = [m.author_id for m in messages]
        author_ids.extend(target.author_id for target in reply_targets.values())
        authors = await self.user_repo.get_many_with_profiles(author_ids)

        def author_ref(author_id: str) -> Dict[str, Any]:
            return {"id": author_id, "name": resolve_display_name(authors.get(author_id))}

        enriched = []
        for message in messages:
            reply_to = None
            target = reply_targets.get(message.reply_to_id) if message.reply_to_id else None
            if target is not None and not target.is_deleted:
                reply_to = {
                    "id": target.id,
                    "content": target.content,
                    "author": author_ref(target.author_id),
                }

            enriched.append({
                "id": message.id,
                "author_id": message.author_id,
                "author": author_ref(message.author_id),
                "group_id": message.group_id,
                "recipient_id": message.recipient_id,
                "type": message.type,
                "content": message.content,
                "file_name": message.file_name,
                "file_type": message.file_type,
                "file_url": self.storage.get_file_url(message.file_key),
                "reply_to_id": message.reply_to_id,
                "reply_to": reply_to,
                "is_deleted": message.is_deleted,
                "edited_at": ensure_utc(message.edited_at),
                "created_at": ensure_utc(message.created_at),
                "sequence_number": message.sequence_number,
            })
        return enriched

    async def _enrich_message(self, message: Message) -> Dict[str, Any]:
        return (await self._enrich_messages([message]))[0]

    async def send_message(
        self,
        author_id: str,
        content: str,
        group_id: Optional[str] = None,
        recipient_id: Optional[str] = None,
        reply_to_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Send a text message, or a reply when reply_to_id is given.

        Args:
            author_id: Sending user
            content: Message text
            group_id: Target group (exclusive with recipient_id)
            recipient_id: Direct recipient (exclusive with group_id)
            reply_to_id: Message being replied to

        Returns:
            Enriched message

        Raises:
            InvalidArgumentError: Bad target combination, blank content,
                or reply target in another channel or deleted
            ForbiddenError: Not a group member, or blocked by the recipient
            NotFoundError: Unknown recipient or reply target
        """
        content = (content or "").strip()
        if not content:
            raise InvalidArgumentError("Message content cannot be empty")

        await self._ensure_can_post(author_id, group_id, recipient_id)

        if reply_to_id:
            target = await self.message_repo.get(reply_to_id)
            if not target:
                raise NotFoundError("Reply target not found")
            if not _same_channel(target, group_id, author_id, recipient_id):
                raise InvalidArgumentError("Reply target belongs to a different conversation")
            if target.is_deleted:
                raise InvalidArgumentError("Cannot reply to a deleted message")

        message = await self._insert_message(
            author_id=author_id,
            group_id=group_id,
            recipient_id=recipient_id,
            type=MessageType.REPLY if reply_to_id else MessageType.TEXT,
            content=content,
            reply_to_id=reply_to_id
        )

        logger.info(f"Message {message.id} sent by {author_id}")
        await self._broadcast(message, "created")
        return await self._enrich_message(message)

    async def send_file_message(
        self,
        author_id: str,
        file_key: str,
        file_name: str,
        file_type: str,
        group_id: Optional[str] = None,
        recipient_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Send a message carrying an uploaded file.

        The file must already be in the blob store under file_key; only
        whitelisted image types are accepted.

        Raises:
            InvalidArgumentError: Missing key or disallowed file type
        """
        if not file_key or not file_key.strip():
            raise InvalidArgumentError("file_key is required")

        allowed_types = settings.get_allowed_file_types_list()
        if file_type not in allowed_types:
            raise InvalidArgumentError(
                f"File type '{file_type}' is not allowed. Allowed: {', '.join(allowed_types)}"
            )

        await self._ensure_can_post(author_id, group_id, recipient_id)

        message = await self._insert_message(
            author_id=author_id,
            group_id=group_id,
            recipient_id=recipient_id,
            type=MessageType.FILE,
            file_key=file_key,
            file_name=file_name,
            file_type=file_type
        )

        logger.info(f"File message {message.id} sent by {author_id} ({file_type})")
        await self._broadcast(message, "created")
        return await self._enrich_message(message)

    async def edit_message(self, user_id: str, message_id: str, content: str) -> Dict[str, Any]:
        """
        Edit the text of one's own text or reply message.

        Raises:
            NotFoundError: Unknown message
            ForbiddenError: Caller is not the author
            InvalidArgumentError: File message, deleted message, or blank content
        """
        message = await self._get_own_message(user_id, message_id)

        if message.type not in EDITABLE_MESSAGE_TYPES:
            raise InvalidArgumentError("File messages cannot be edited")
        if message.is_deleted:
            raise InvalidArgumentError("Deleted messages cannot be edited")

        content = (content or "").strip()
        if not content:
            raise InvalidArgumentError("Message content cannot be empty")

        message = await self.message_repo.update_content(message, content)
        await self.db.commit()

        logger.info(f"Message {message_id} edited by {user_id}")
        await self._broadcast(message, "edited")
        return await self._enrich_message(message)

    async def delete_message(self, user_id: str, message_id: str) -> Dict[str, Any]:
        """
        Soft-delete one's own message. Repeating the call is a no-op.

        Raises:
            NotFoundError: Unknown message
            ForbiddenError: Caller is not the author
        """
        message = await self._get_own_message(user_id, message_id)

        if message.is_deleted:
            return await self._enrich_message(message)

        message = await self.message_repo.soft_delete(message)
        await self.db.commit()

        logger.info(f"Message {message_id} deleted by {user_id}")
        await self._broadcast(message, "deleted")
        return await self._enrich_message(message)

    async def list_group_messages(
        self,
        user_id: str,
        group_id: str,
        limit: int = 50
    ) -> List[Dict[str, Any]]:
        """
        Most recent group messages, oldest first.

        Raises:
            ForbiddenError: Caller is not a member
        """
        if not await self.member_repo.is_member(group_id, user_id):
            raise ForbiddenError("You are not a member of this group")

        messages = await self.message_repo.get_group_messages(group_id, limit)
        messages.reverse()
        return await self._enrich_messages(messages)

    async def list_direct_messages(
        self,
        user_id: str,
        other_user_id: str,
        limit: int = 50
    ) -> List[Dict[str, Any]]:
        """Most recent messages exchanged with other_user_id, oldest first."""
        messages = await self.message_repo.get_direct_messages(user_id, other_user_id, limit)
        messages.reverse()
        return await self._enrich_messages(messages)

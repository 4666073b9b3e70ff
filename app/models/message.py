"""
Message model.

A message belongs either to a group or to a direct pair (author and
recipient), never both and never neither. Deletion is soft: the row stays
so reply references and ordering remain stable.
"""
import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, IDMixin, CreatedAtMixin

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.group import Group


class MessageType(str, enum.Enum):
    """Enum for message types."""
    TEXT = "text"
    FILE = "file"
    REPLY = "reply"


EDITABLE_MESSAGE_TYPES = (MessageType.TEXT, MessageType.REPLY)


class Message(Base, IDMixin, CreatedAtMixin):
    """Message in a group or a direct conversation."""

    __tablename__ = "messages"

    author_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="User who sent the message"
    )

    group_id: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
        doc="Group the message was posted to"
    )

    recipient_id: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
        doc="Recipient of a direct message"
    )

    type: Mapped[MessageType] = mapped_column(
        SQLEnum(MessageType, name="message_type", native_enum=False),
        nullable=False,
        doc="'text', 'file' or 'reply'"
    )

    content: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        doc="Text content (null for file messages and deleted messages)"
    )

    # File attachment (opaque blob-store reference)
    file_key: Mapped[str | None] = mapped_column(String(500), nullable=True)
    file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    file_type: Mapped[str | None] = mapped_column(String(100), nullable=True)

    reply_to_id: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("messages.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        doc="ID of message this is replying to"
    )

    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        doc="Soft delete flag"
    )

    edited_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="When the content was last edited"
    )

    sequence_number: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        unique=True,
        doc="Monotonically increasing insertion counter (feed ordering)"
    )

    # Relationships
    author: Mapped["User"] = relationship(foreign_keys=[author_id])
    recipient: Mapped["User | None"] = relationship(foreign_keys=[recipient_id])
    group: Mapped["Group | None"] = relationship(back_populates="messages")
    reply_to: Mapped["Message | None"] = relationship(
        remote_side="Message.id",
        foreign_keys=[reply_to_id]
    )

    __table_args__ = (
        CheckConstraint(
            "(group_id IS NOT NULL AND recipient_id IS NULL) OR "
            "(group_id IS NULL AND recipient_id IS NOT NULL)",
            name="ck_messages_single_channel"
        ),
    )

    def __repr__(self) -> str:
        content_preview = self.content[:50] if self.content else f"<{self.type}>"
        return f"<Message(id={self.id}, type={self.type}, content='{content_preview}')>"


Index("idx_messages_group_seq", Message.group_id, Message.sequence_number.desc())
Index("idx_messages_direct_pair", Message.author_id, Message.recipient_id, Message.sequence_number.desc())

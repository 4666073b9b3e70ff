"""
UserRelationship model for friend and block edges.

Edges are directed. An established friendship is two reciprocal accepted
friend edges; a pending request is a single edge. A block is a single
blocked edge owned by the blocker.
"""
import enum
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, IDMixin, CreatedAtMixin

if TYPE_CHECKING:
    from app.models.user import User


class RelationshipType(str, enum.Enum):
    """Enum for relationship edge kinds."""
    FRIEND = "friend"
    BLOCKED = "blocked"


class RelationshipStatus(str, enum.Enum):
    """Enum for relationship edge status (blocks are always accepted)."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class UserRelationship(Base, IDMixin, CreatedAtMixin):
    """Directed edge from user_id to target_user_id."""

    __tablename__ = "user_relationships"

    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        doc="Edge owner (requester or blocker)"
    )

    target_user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        doc="Edge target (request recipient or blocked user)"
    )

    type: Mapped[RelationshipType] = mapped_column(
        SQLEnum(RelationshipType, name="relationship_type", native_enum=False),
        nullable=False,
        doc="'friend' or 'blocked'"
    )

    status: Mapped[RelationshipStatus] = mapped_column(
        SQLEnum(RelationshipStatus, name="relationship_status", native_enum=False),
        nullable=False,
        doc="'pending', 'accepted' or 'rejected'"
    )

    user: Mapped["User"] = relationship(
        back_populates="outgoing_relationships",
        foreign_keys=[user_id]
    )

    target_user: Mapped["User"] = relationship(
        back_populates="incoming_relationships",
        foreign_keys=[target_user_id]
    )

    def __repr__(self) -> str:
        return (
            f"<UserRelationship(user_id={self.user_id}, target_user_id={self.target_user_id}, "
            f"type={self.type}, status={self.status})>"
        )


Index("idx_user_relationships_user", UserRelationship.user_id)
Index("idx_user_relationships_target", UserRelationship.target_user_id)
Index("idx_user_relationships_user_target", UserRelationship.user_id, UserRelationship.target_user_id)

"""
Group and GroupMember models.

The group creator is the permanent owner: their admin membership is
inserted together with the group and can never be removed.
"""
import enum
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, IDMixin, CreatedAtMixin
from app.utils.datetime_utils import utc_now

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.message import Message


class GroupRole(str, enum.Enum):
    """Enum for group member roles."""
    ADMIN = "admin"
    MEMBER = "member"


class Group(Base, IDMixin, CreatedAtMixin):
    """Group chat."""

    __tablename__ = "groups"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Group name"
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        doc="Optional group description"
    )

    created_by: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        doc="Creator and permanent owner (immutable)"
    )

    is_private: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        doc="Whether the group is private"
    )

    # Relationships
    members: Mapped[List["GroupMember"]] = relationship(
        back_populates="group",
        cascade="all, delete-orphan"
    )

    messages: Mapped[List["Message"]] = relationship(
        back_populates="group",
        cascade="all, delete-orphan",
        lazy="select"
    )

    creator: Mapped["User"] = relationship(foreign_keys=[created_by])

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name={self.name})>"


class GroupMember(Base):
    """
    GroupMember model - one row per (group, user) pair.

    The composite primary key enforces the single-membership invariant.
    """

    __tablename__ = "group_members"

    group_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
        doc="Group ID"
    )

    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        doc="User ID"
    )

    role: Mapped[GroupRole] = mapped_column(
        SQLEnum(GroupRole, name="group_role", native_enum=False),
        default=GroupRole.MEMBER,
        nullable=False,
        doc="Member role: 'admin' or 'member'"
    )

    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        doc="When the user joined the group"
    )

    group: Mapped["Group"] = relationship(back_populates="members")
    user: Mapped["User"] = relationship(back_populates="group_memberships")

    def __repr__(self) -> str:
        return (
            f"<GroupMember(group_id={self.group_id}, "
            f"user_id={self.user_id}, role={self.role})>"
        )


Index("idx_group_members_user", GroupMember.user_id)
Index("idx_groups_created_by", Group.created_by)

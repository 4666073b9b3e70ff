"""
User and UserProfile models.

Users are local references to identities issued by the external identity
provider. Authentication happens upstream; the local row only keeps the
display attributes needed by the chat (name, email) plus the optional
profile (nickname, photo).
"""
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, IDMixin, CreatedAtMixin
from app.utils.datetime_utils import utc_now

if TYPE_CHECKING:
    from app.models.group import GroupMember
    from app.models.relationship import UserRelationship


class User(Base, IDMixin, CreatedAtMixin):
    """
    User model - local reference to an identity provider subject.

    Rows are created lazily on the first authenticated request.
    """

    __tablename__ = "users"

    external_id: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Subject claim from the identity provider"
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        doc="Real name from the identity provider"
    )

    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        doc="Email address from the identity provider"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
        doc="When the user was last updated"
    )

    # Relationships
    profile: Mapped["UserProfile | None"] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="selectin"
    )

    group_memberships: Mapped[List["GroupMember"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan"
    )

    outgoing_relationships: Mapped[List["UserRelationship"]] = relationship(
        back_populates="user",
        foreign_keys="UserRelationship.user_id",
        cascade="all, delete-orphan"
    )

    incoming_relationships: Mapped[List["UserRelationship"]] = relationship(
        back_populates="target_user",
        foreign_keys="UserRelationship.target_user_id",
        cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str | None:
        """Nickname when set, otherwise the real name."""
        if self.profile and self.profile.nickname:
            return self.profile.nickname
        return self.name

    def __repr__(self) -> str:
        return f"<User(id={self.id}, external_id={self.external_id})>"


class UserProfile(Base, IDMixin):
    """
    Optional per-user profile (0-or-1 per user).

    Created on the first profile update.
    """

    __tablename__ = "user_profiles"

    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        doc="Owning user"
    )

    nickname: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        doc="Display nickname, searched by exact match"
    )

    profile_photo_key: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        doc="Opaque blob-store key of the profile photo"
    )

    user: Mapped["User"] = relationship(back_populates="profile")

    def __repr__(self) -> str:
        return f"<UserProfile(user_id={self.user_id}, nickname={self.nickname})>"


Index("idx_user_profiles_nickname", UserProfile.nickname)

"""Projects and their membership rows."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agenticwit.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin, utcnow

if TYPE_CHECKING:
    from .user import User

ACCESSIBILITY_LEVELS = ("A", "AA", "AAA")
MEMBER_ROLES = ("admin", "member", "viewer")


class Project(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Owned resource guarded by membership roles.

    Ownership lives on ``owner_id`` and is never represented as a membership row.
    """

    __tablename__ = "projects"

    key: Mapped[str] = mapped_column(String(10), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    accessibility_level: Mapped[str] = mapped_column(String(3), nullable=False, default="AA")
    high_contrast_mode: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    screen_reader_optimized: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    owner: Mapped[User] = relationship(lazy="joined")
    members: Mapped[list[ProjectMember]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProjectMember.joined_at",
    )

    __table_args__ = (
        UniqueConstraint("key", name="uq_projects_key"),
        CheckConstraint(
            "accessibility_level IN ('A','AA','AAA')", name="accessibility_level_allowed"
        ),
        Index("ix_projects_owner_id", "owner_id"),
        Index("ix_projects_is_archived", "is_archived"),
    )


class ProjectMember(PKMixin, ReprMixin, db.Model):
    """(project, user) pair carrying a non-owner role."""

    __tablename__ = "project_members"

    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(String(10), nullable=False, default="member")
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    project: Mapped[Project] = relationship(back_populates="members")
    user: Mapped[User] = relationship(lazy="joined")

    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_members_project_id_user_id"),
        CheckConstraint("role IN ('admin','member','viewer')", name="role_allowed"),
        Index("ix_project_members_user_id", "user_id"),
        Index("ix_project_members_role", "role"),
    )

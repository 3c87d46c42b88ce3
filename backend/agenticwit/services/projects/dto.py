# agenticwit/services/projects/dto.py
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any

from agenticwit.models.project import Project, ProjectMember
from agenticwit.services._shared.dto import PageMeta

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class ProjectCreateIn:
    """
    Input DTO for project creation.

    :param key: Unique uppercase key (``^[A-Z][A-Z0-9]*$``, 2-10 chars).
    :param name: Display name (3-100 chars).
    :param description: Optional text (max 1000 chars).
    :param accessibility_level: Target WCAG level ``A`` | ``AA`` | ``AAA``.
    """

    key: str
    name: str
    description: str | None = None
    is_public: bool = False
    accessibility_level: str = "AA"
    high_contrast_mode: bool = False
    screen_reader_optimized: bool = False


@dataclass(frozen=True, slots=True)
class ProjectUpdateIn:
    """Partial update; ``None`` means "leave unchanged". The key is immutable."""

    name: str | None = None
    description: str | None = None
    is_public: bool | None = None
    is_archived: bool | None = None
    accessibility_level: str | None = None
    high_contrast_mode: bool | None = None
    screen_reader_optimized: bool | None = None

    def changes(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass(frozen=True, slots=True)
class ProjectSearchIn:
    """
    Search filters.

    :param query: Case-insensitive substring over name, key and description.
    :param page: 1-based page.
    :param limit: Page size, clamped to 1..100.
    """

    query: str | None = None
    is_public: bool | None = None
    is_archived: bool | None = None
    owner_id: int | None = None
    page: int = 1
    limit: int = 20


@dataclass(frozen=True, slots=True)
class MemberAddIn:
    user_id: int
    role: str = "member"


@dataclass(frozen=True, slots=True)
class MemberUpdateIn:
    role: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class ProjectOwnerOut:
    id: int
    username: str
    first_name: str | None
    last_name: str | None


@dataclass(frozen=True, slots=True)
class ProjectOut:
    """
    Project as seen by a specific caller.

    :ivar user_role: Caller's effective role (``owner``/``admin``/``member``/``viewer``).
    :ivar member_count: Number of membership rows (the owner is not counted).
    """

    id: int
    key: str
    name: str
    description: str | None
    is_public: bool
    is_archived: bool
    accessibility_level: str
    high_contrast_mode: bool
    screen_reader_optimized: bool
    owner_id: int
    created_at: datetime
    updated_at: datetime
    owner: ProjectOwnerOut | None
    member_count: int
    user_role: str | None


@dataclass(frozen=True, slots=True)
class ProjectListOut:
    items: list[ProjectOut]
    meta: PageMeta


@dataclass(frozen=True, slots=True)
class MemberUserOut:
    id: int
    username: str
    email: str
    first_name: str | None
    last_name: str | None


@dataclass(frozen=True, slots=True)
class MemberOut:
    id: int
    project_id: int
    user_id: int
    role: str
    joined_at: datetime
    user: MemberUserOut


# ---------------------------- Converters ---------------------------------- #


def project_to_out(project: Project, *, role: str | None, member_count: int) -> ProjectOut:
    owner = project.owner
    return ProjectOut(
        id=project.id,
        key=project.key,
        name=project.name,
        description=project.description,
        is_public=project.is_public,
        is_archived=project.is_archived,
        accessibility_level=project.accessibility_level,
        high_contrast_mode=project.high_contrast_mode,
        screen_reader_optimized=project.screen_reader_optimized,
        owner_id=project.owner_id,
        created_at=project.created_at,
        updated_at=project.updated_at,
        owner=(
            ProjectOwnerOut(
                id=owner.id,
                username=owner.username,
                first_name=owner.first_name,
                last_name=owner.last_name,
            )
            if owner is not None
            else None
        ),
        member_count=member_count,
        user_role=role,
    )


def member_to_out(member: ProjectMember) -> MemberOut:
    user = member.user
    return MemberOut(
        id=member.id,
        project_id=member.project_id,
        user_id=member.user_id,
        role=member.role,
        joined_at=member.joined_at,
        user=MemberUserOut(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
        ),
    )

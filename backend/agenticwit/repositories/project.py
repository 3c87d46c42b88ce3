"""Project and membership repositories."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, cast

from sqlalchemy import Select, and_, func, or_, select

from agenticwit.models.project import Project, ProjectMember
from agenticwit.repositories.base import BaseRepository, Page, paginate_select


@dataclass(frozen=True, slots=True)
class ProjectSearchFilters:
    """
    Optional narrowing for :meth:`ProjectRepository.search`.

    :param query: Case-insensitive substring over name, key and description.
    :param is_public: Filter by visibility.
    :param is_archived: Filter by archival flag.
    :param owner_id: Filter by owner.
    """

    query: str | None = None
    is_public: bool | None = None
    is_archived: bool | None = None
    owner_id: int | None = None


class ProjectRepository(BaseRepository[Project]):
    """Persistence-only repository for :class:`Project`."""

    model = Project

    def _filterable_fields(self):
        return {"key": Project.key, "owner_id": Project.owner_id}

    def _updatable_fields(self):
        return {
            "name",
            "description",
            "is_public",
            "is_archived",
            "accessibility_level",
            "high_contrast_mode",
            "screen_reader_optimized",
        }

    # ---------------------------- Access lookups ----------------------------

    def get_with_membership(
        self, project_id: int, user_id: int | None
    ) -> tuple[Project, ProjectMember | None] | None:
        """Fetch a project together with the membership row of ``user_id``.

        :param project_id: Project identifier.
        :param user_id: Caller. ``None`` never matches a membership row.
        :returns: ``(project, membership_or_None)`` or ``None`` when the project
            does not exist.
        """
        stmt = (
            select(Project, ProjectMember)
            .outerjoin(
                ProjectMember,
                and_(ProjectMember.project_id == Project.id, ProjectMember.user_id == user_id),
            )
            .where(Project.id == project_id)
        )
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        return cast(Project, row[0]), cast(ProjectMember | None, row[1])

    def key_exists(self, key: str) -> bool:
        return self.exists(key=key)

    def member_counts(self, project_ids: Iterable[int]) -> dict[int, int]:
        """Return ``{project_id: membership_rows}`` for the given projects."""
        ids = list(project_ids)
        if not ids:
            return {}
        stmt = (
            select(ProjectMember.project_id, func.count(ProjectMember.id))
            .where(ProjectMember.project_id.in_(ids))
            .group_by(ProjectMember.project_id)
        )
        counts = {int(pid): int(n) for pid, n in self.session.execute(stmt).all()}
        return {pid: counts.get(pid, 0) for pid in ids}

    # ---------------------------- Search ----------------------------

    def _visible_to(self, user_id: int) -> Select[Any]:
        """Projects owned by, shared with, or public for ``user_id``, with the member role."""
        return (
            select(Project, ProjectMember.role)
            .outerjoin(
                ProjectMember,
                and_(ProjectMember.project_id == Project.id, ProjectMember.user_id == user_id),
            )
            .where(
                or_(
                    Project.owner_id == user_id,
                    ProjectMember.id.is_not(None),
                    Project.is_public.is_(True),
                )
            )
        )

    def search(
        self,
        user_id: int,
        filters: ProjectSearchFilters,
        *,
        page: int,
        limit: int,
    ) -> Page[tuple[Project, str | None]]:
        """List projects visible to ``user_id``, most recently updated first.

        :returns: Page of ``(project, membership_role_or_None)`` rows.
        """
        stmt = self._visible_to(user_id)
        if filters.query:
            q = filters.query
            stmt = stmt.where(
                or_(
                    Project.name.icontains(q, autoescape=True),
                    Project.key.icontains(q, autoescape=True),
                    Project.description.icontains(q, autoescape=True),
                )
            )
        if filters.is_public is not None:
            stmt = stmt.where(Project.is_public.is_(filters.is_public))
        if filters.is_archived is not None:
            stmt = stmt.where(Project.is_archived.is_(filters.is_archived))
        if filters.owner_id is not None:
            stmt = stmt.where(Project.owner_id == filters.owner_id)

        stmt = stmt.order_by(Project.updated_at.desc(), Project.id.desc())
        rows, total = paginate_select(self.session, stmt, page=page, limit=limit, scalars=False)
        items = [(cast(Project, r[0]), cast(str | None, r[1])) for r in rows]
        return Page(items=items, total=total, page=page, limit=limit)


class ProjectMemberRepository(BaseRepository[ProjectMember]):
    """Persistence-only repository for :class:`ProjectMember`."""

    model = ProjectMember

    def _filterable_fields(self):
        return {
            "project_id": ProjectMember.project_id,
            "user_id": ProjectMember.user_id,
            "role": ProjectMember.role,
        }

    def _updatable_fields(self):
        return {"role"}

    def get_in_project(self, project_id: int, member_id: int) -> ProjectMember | None:
        """Fetch membership ``member_id`` only if it belongs to ``project_id``."""
        return self.find_one_by(ProjectMember.project_id == project_id, ProjectMember.id == member_id)

    def get_for_user(self, project_id: int, user_id: int) -> ProjectMember | None:
        return self.find_one_by(
            ProjectMember.project_id == project_id, ProjectMember.user_id == user_id
        )

    def list_for_project(self, project_id: int) -> Sequence[ProjectMember]:
        """Members of ``project_id`` in join order."""
        stmt = (
            select(ProjectMember)
            .where(ProjectMember.project_id == project_id)
            .order_by(ProjectMember.joined_at.asc(), ProjectMember.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def find_one_by(self, *criteria: Any) -> ProjectMember | None:
        stmt = select(ProjectMember).where(*criteria)
        return cast(ProjectMember | None, self.session.execute(stmt).scalars().first())

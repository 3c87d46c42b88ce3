# agenticwit/services/projects/service.py
from __future__ import annotations

import logging
import re

from sqlalchemy.exc import IntegrityError

from agenticwit.models.project import ACCESSIBILITY_LEVELS, Project
from agenticwit.repositories.project import ProjectSearchFilters
from agenticwit.services._shared.base import BaseService
from agenticwit.services._shared.dto import PageMeta
from agenticwit.services._shared.errors import (
    DuplicateIdentityError,
    FieldIssue,
    ValidationError,
    violates_any,
)
from agenticwit.services._shared.policies.project_access import Action, Role, resolve_access
from agenticwit.services.projects.access import ProjectAccessResolver
from agenticwit.services.projects.dto import (
    ProjectCreateIn,
    ProjectListOut,
    ProjectOut,
    ProjectSearchIn,
    ProjectUpdateIn,
    project_to_out,
)

log = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"^[A-Z][A-Z0-9]*$")
MAX_PAGE_SIZE = 100


def _role_value(role: Role | None) -> str | None:
    return role.value if role is not None else None


def _validate_fields(
    *,
    key: str | None = None,
    name: str | None = None,
    description: str | None = None,
    accessibility_level: str | None = None,
) -> None:
    issues: list[FieldIssue] = []
    if key is not None:
        if not 2 <= len(key) <= 10:
            issues.append(FieldIssue("key", "Project key must be 2-10 characters"))
        if not KEY_PATTERN.match(key):
            issues.append(
                FieldIssue(
                    "key",
                    "Project key must start with a letter and contain only uppercase letters and numbers",
                )
            )
    if name is not None and not 3 <= len(name) <= 100:
        issues.append(FieldIssue("name", "Project name must be 3-100 characters"))
    if description is not None and len(description) > 1000:
        issues.append(FieldIssue("description", "Description must be at most 1000 characters"))
    if accessibility_level is not None and accessibility_level not in ACCESSIBILITY_LEVELS:
        issues.append(FieldIssue("accessibility_level", "Must be one of: A, AA, AAA"))
    if issues:
        raise ValidationError(issues)


class ProjectService(BaseService):
    """
    Project CRUD and search guarded by the role/permission matrix.

    Reads require any access; update needs ``edit``; delete needs ``delete``.
    A caller without any access gets :class:`NotFoundError`, the same as for a
    missing project.
    """

    def create(self, dto: ProjectCreateIn) -> ProjectOut:
        """
        Create a project owned by the caller.

        :raises ValidationError: Malformed key, name, description or level.
        :raises DuplicateIdentityError: The key is already used (``field="key"``).
        """
        auth = self.require_auth()
        _validate_fields(
            key=dto.key,
            name=dto.name,
            description=dto.description,
            accessibility_level=dto.accessibility_level,
        )

        with self.rw_uow() as uow:
            if uow.projects.key_exists(dto.key):
                raise DuplicateIdentityError("Project", "key", "Project key already exists")
            project = Project(
                key=dto.key,
                name=dto.name,
                description=dto.description,
                is_public=dto.is_public,
                accessibility_level=dto.accessibility_level,
                high_contrast_mode=dto.high_contrast_mode,
                screen_reader_optimized=dto.screen_reader_optimized,
                owner_id=auth.user_id,
            )
            try:
                uow.projects.add(project)
            except IntegrityError as exc:
                if violates_any(exc, "uq_projects_key", "projects.key"):
                    raise DuplicateIdentityError(
                        "Project", "key", "Project key already exists"
                    ) from exc
                raise
            out = project_to_out(project, role=Role.OWNER.value, member_count=0)

        log.info("project.created", extra={"actor_id": auth.user_id, "project_id": out.id})
        self.record_audit(
            "PROJECT_CREATED", "project", details={"project_id": out.id, "project_key": out.key}
        )
        return out

    def get(self, project_id: int) -> ProjectOut:
        """Return a project with the caller's role and member count."""
        auth = self.require_auth()
        with self.ro_uow() as uow:
            project, access = ProjectAccessResolver(uow).guard(project_id, auth.user_id, Action.VIEW)
            count = uow.projects.member_counts([project.id])[project.id]
            return project_to_out(project, role=_role_value(access.role), member_count=count)

    def update(self, project_id: int, dto: ProjectUpdateIn) -> ProjectOut:
        """
        Apply a partial update. Needs ``edit`` (owner, admin or member).

        :raises PermissionDeniedError: Caller is a viewer.
        """
        auth = self.require_auth()
        changes = dto.changes()
        _validate_fields(
            name=changes.get("name"),
            description=changes.get("description"),
            accessibility_level=changes.get("accessibility_level"),
        )

        with self.rw_uow() as uow:
            project, access = ProjectAccessResolver(uow).guard(project_id, auth.user_id, Action.EDIT)
            uow.projects.assign_updates(project, changes)
            count = uow.projects.member_counts([project.id])[project.id]
            out = project_to_out(project, role=_role_value(access.role), member_count=count)

        log.info("project.updated", extra={"actor_id": auth.user_id, "project_id": project_id})
        self.record_audit(
            "PROJECT_UPDATED", "project", details={"project_id": project_id, "changes": changes}
        )
        return out

    def delete(self, project_id: int) -> None:
        """
        Delete a project and its memberships. Owner only.

        :raises PermissionDeniedError: Caller is not the owner.
        """
        auth = self.require_auth()
        with self.rw_uow() as uow:
            project, _ = ProjectAccessResolver(uow).guard(project_id, auth.user_id, Action.DELETE)
            key = project.key
            uow.projects.delete(project)

        log.info("project.deleted", extra={"actor_id": auth.user_id, "project_id": project_id})
        self.record_audit(
            "PROJECT_DELETED", "project", details={"project_id": project_id, "project_key": key}
        )

    def search(self, dto: ProjectSearchIn) -> ProjectListOut:
        """
        List projects the caller owns, belongs to, or that are public.

        Rows are ordered by ``updated_at`` descending and each carries the
        caller's effective role.
        """
        auth = self.require_auth()
        page, limit = self.ensure_pagination(page=dto.page, limit=dto.limit, max_limit=MAX_PAGE_SIZE)
        filters = ProjectSearchFilters(
            query=dto.query or None,
            is_public=dto.is_public,
            is_archived=dto.is_archived,
            owner_id=dto.owner_id,
        )

        with self.ro_uow() as uow:
            result = uow.projects.search(auth.user_id, filters, page=page, limit=limit)
            counts = uow.projects.member_counts(p.id for p, _ in result.items)
            items = [
                project_to_out(
                    p,
                    role=_role_value(resolve_access(p, member_role, auth.user_id).role),
                    member_count=counts[p.id],
                )
                for p, member_role in result.items
            ]

        return ProjectListOut(
            items=items, meta=PageMeta.build(page=page, limit=limit, total=result.total)
        )


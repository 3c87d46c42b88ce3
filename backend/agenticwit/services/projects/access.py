"""Access Control Resolver: project lookup plus role resolution."""

from __future__ import annotations

import logging
from typing import Any

from agenticwit.models.project import Project, ProjectMember
from agenticwit.services._shared.errors import NotFoundError, PermissionDeniedError
from agenticwit.services._shared.policies.project_access import (
    AccessResolution,
    Action,
    resolve_access,
)

log = logging.getLogger(__name__)


class ProjectAccessResolver:
    """
    Resolve a caller's relationship to a project inside an open Unit of Work.

    The resolver never caches: every call re-reads the project and the
    caller's membership row.

    :param uow: Unit of Work exposing a ``projects`` repository.
    """

    def __init__(self, uow: Any) -> None:
        self.uow = uow

    def load(
        self, project_id: int, user_id: int | None
    ) -> tuple[Project | None, ProjectMember | None, AccessResolution]:
        """Return ``(project, membership, resolution)``; project is ``None`` when missing."""
        found = self.uow.projects.get_with_membership(project_id, user_id)
        project, membership = found if found is not None else (None, None)
        return project, membership, resolve_access(project, membership.role if membership else None, user_id)

    def resolve(self, project_id: int, user_id: int | None) -> AccessResolution:
        """``{has_access, role, is_owner}`` for ``user_id`` on ``project_id``."""
        return self.load(project_id, user_id)[2]

    def guard(self, project_id: int, user_id: int, action: Action) -> tuple[Project, AccessResolution]:
        """
        Load a project and enforce ``action`` for the caller.

        :raises NotFoundError: Project missing, or caller has no access at all.
            Both cases look the same so private projects are not disclosed.
        :raises PermissionDeniedError: Caller can see the project but lacks ``action``.
        """
        project, _membership, access = self.load(project_id, user_id)
        if project is None or not access.has_access:
            raise NotFoundError("Project", project_id)
        if not access.can(action):
            log.info(
                "project.permission_denied",
                extra={"actor_id": user_id, "project_id": project_id, "action": action.value},
            )
            raise PermissionDeniedError()
        return project, access

# agenticwit/services/projects/members.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from agenticwit.models.project import ProjectMember
from agenticwit.services._shared.base import BaseService
from agenticwit.services._shared.errors import (
    AlreadyMemberError,
    FieldIssue,
    NotFoundError,
    ValidationError,
    violates_any,
)
from agenticwit.services._shared.policies.project_access import MEMBERSHIP_ROLES, Action
from agenticwit.services.projects.access import ProjectAccessResolver
from agenticwit.services.projects.dto import MemberAddIn, MemberOut, MemberUpdateIn, member_to_out

log = logging.getLogger(__name__)

_ALLOWED_ROLES = tuple(r.value for r in MEMBERSHIP_ROLES)


def _ensure_membership_role(role: str) -> None:
    # Ownership is not a membership row, so "owner" is rejected here too
    if role not in _ALLOWED_ROLES:
        raise ValidationError(
            [FieldIssue("role", f"Role must be one of: {', '.join(_ALLOWED_ROLES)}")]
        )


class ProjectMemberService(BaseService):
    """
    Membership management. Every mutation needs ``manage_members``.

    Removing oneself is not special-cased: a plain member or viewer cannot
    leave a project on their own.
    """

    def add(self, project_id: int, dto: MemberAddIn) -> MemberOut:
        """
        Add ``dto.user_id`` to the project with ``dto.role``.

        :raises ValidationError: Role outside ``admin|member|viewer``.
        :raises NotFoundError: Project invisible to the caller, or unknown user.
        :raises PermissionDeniedError: Caller lacks ``manage_members``.
        :raises AlreadyMemberError: Target already has a row or owns the project.
        """
        auth = self.require_auth()
        _ensure_membership_role(dto.role)

        with self.rw_uow() as uow:
            project, _ = ProjectAccessResolver(uow).guard(
                project_id, auth.user_id, Action.MANAGE_MEMBERS
            )
            if uow.users.get(dto.user_id) is None:
                raise NotFoundError("User", dto.user_id)
            if project.owner_id == dto.user_id:
                raise AlreadyMemberError("User is the owner of this project")
            if uow.members.get_for_user(project_id, dto.user_id) is not None:
                raise AlreadyMemberError()

            member = ProjectMember(project_id=project_id, user_id=dto.user_id, role=dto.role)
            try:
                uow.members.add(member)
            except IntegrityError as exc:
                if violates_any(exc, "uq_project_members_project_id_user_id", "project_members.project_id"):
                    raise AlreadyMemberError() from exc
                raise
            out = member_to_out(member)

        log.info(
            "project.member_added",
            extra={"actor_id": auth.user_id, "project_id": project_id, "member_id": out.id},
        )
        self.record_audit(
            "PROJECT_MEMBER_ADDED",
            "project",
            details={"project_id": project_id, "new_member_id": dto.user_id, "role": dto.role},
        )
        return out

    def list(self, project_id: int) -> list[MemberOut]:
        """Members in join order. Any access (including public viewer) suffices."""
        auth = self.require_auth()
        with self.ro_uow() as uow:
            ProjectAccessResolver(uow).guard(project_id, auth.user_id, Action.VIEW)
            return [member_to_out(m) for m in uow.members.list_for_project(project_id)]

    def update(self, project_id: int, member_id: int, dto: MemberUpdateIn) -> MemberOut:
        """Change a member's role."""
        auth = self.require_auth()
        _ensure_membership_role(dto.role)

        with self.rw_uow() as uow:
            ProjectAccessResolver(uow).guard(project_id, auth.user_id, Action.MANAGE_MEMBERS)
            member = uow.members.get_in_project(project_id, member_id)
            if member is None:
                raise NotFoundError("ProjectMember", member_id)
            uow.members.assign_updates(member, {"role": dto.role})
            out = member_to_out(member)

        self.record_audit(
            "PROJECT_MEMBER_UPDATED",
            "project",
            details={"project_id": project_id, "member_id": member_id, "new_role": dto.role},
        )
        return out

    def remove(self, project_id: int, member_id: int) -> None:
        """Delete a membership row."""
        auth = self.require_auth()
        with self.rw_uow() as uow:
            ProjectAccessResolver(uow).guard(project_id, auth.user_id, Action.MANAGE_MEMBERS)
            member = uow.members.get_in_project(project_id, member_id)
            if member is None:
                raise NotFoundError("ProjectMember", member_id)
            removed_user_id = member.user_id
            uow.members.delete(member)

        log.info(
            "project.member_removed",
            extra={"actor_id": auth.user_id, "project_id": project_id, "member_id": member_id},
        )
        self.record_audit(
            "PROJECT_MEMBER_REMOVED",
            "project",
            details={"project_id": project_id, "member_id": member_id, "user_id": removed_user_id},
        )

"""Project role resolution and the fixed permission matrix."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class Role(str, Enum):
    """Privilege level of a user on a project, highest first."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


class Action(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"
    MANAGE_MEMBERS = "manage_members"


PERMISSIONS: dict[Role, frozenset[Action]] = {
    Role.OWNER: frozenset({Action.VIEW, Action.EDIT, Action.DELETE, Action.MANAGE_MEMBERS}),
    Role.ADMIN: frozenset({Action.VIEW, Action.EDIT, Action.MANAGE_MEMBERS}),
    Role.MEMBER: frozenset({Action.VIEW, Action.EDIT}),
    Role.VIEWER: frozenset({Action.VIEW}),
}

# Roles a membership row may carry; ownership is never stored as a row
MEMBERSHIP_ROLES: tuple[Role, ...] = (Role.ADMIN, Role.MEMBER, Role.VIEWER)


def has_permission(role: Role | str | None, action: Action | str) -> bool:
    """
    Look ``action`` up in the matrix for ``role``.

    :param role: Resolved role, or ``None`` when the caller has no access.
    :param action: Requested action.
    :returns: ``False`` for a missing or unknown role.
    """
    if role is None:
        return False
    try:
        return Action(action) in PERMISSIONS[Role(role)]
    except ValueError:
        return False


@dataclass(frozen=True, slots=True)
class AccessResolution:
    """
    Relationship of a caller to a project, computed per request.

    :ivar has_access: Whether the caller may at least view the project.
    :ivar role: Effective role, ``None`` when there is no access.
    :ivar is_owner: Whether the caller owns the project.
    :ivar exists: Whether the project exists at all (never exposed to callers
        without access).
    """

    has_access: bool
    role: Role | None = None
    is_owner: bool = False
    exists: bool = True

    def can(self, action: Action | str) -> bool:
        return self.has_access and has_permission(self.role, action)


NO_ACCESS = AccessResolution(has_access=False)
MISSING = AccessResolution(has_access=False, exists=False)


class _ProjectLike(Protocol):
    owner_id: int
    is_public: bool


def resolve_access(
    project: _ProjectLike | None,
    membership_role: str | None,
    user_id: int | None,
) -> AccessResolution:
    """
    Decide the caller's relationship to ``project``.

    Precedence: owner, then the stored membership role, then public viewer, else
    no access. A stored role wins over the public flag.
    """
    if project is None:
        return MISSING
    if user_id is not None and project.owner_id == user_id:
        return AccessResolution(has_access=True, role=Role.OWNER, is_owner=True)
    if membership_role is not None:
        return AccessResolution(has_access=True, role=Role(membership_role))
    if project.is_public:
        return AccessResolution(has_access=True, role=Role.VIEWER)
    return NO_ACCESS

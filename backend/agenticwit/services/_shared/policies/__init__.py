"""Pure decision functions shared by services (no I/O)."""

from .password import PASSWORD_RULES, check_password_strength, ensure_password_strength
from .project_access import (
    PERMISSIONS,
    AccessResolution,
    Action,
    Role,
    has_permission,
    resolve_access,
)

__all__ = [
    "PASSWORD_RULES",
    "PERMISSIONS",
    "AccessResolution",
    "Action",
    "Role",
    "check_password_strength",
    "ensure_password_strength",
    "has_permission",
    "resolve_access",
]

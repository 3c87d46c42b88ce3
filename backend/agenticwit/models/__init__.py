from agenticwit.models.audit_log import AuditLog
from agenticwit.models.project import Project, ProjectMember
from agenticwit.models.refresh_token import RefreshToken
from agenticwit.models.user import User

__all__ = [
    "AuditLog",
    "Project",
    "ProjectMember",
    "RefreshToken",
    "User",
]

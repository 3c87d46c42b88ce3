from .access import ProjectAccessResolver
from .members import ProjectMemberService
from .service import ProjectService

__all__ = ["ProjectAccessResolver", "ProjectMemberService", "ProjectService"]

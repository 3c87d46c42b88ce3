"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from agenticwit.repositories.audit_log import AuditLogRepository
from agenticwit.repositories.base import BaseRepository, Page, paginate_select
from agenticwit.repositories.project import (
    ProjectMemberRepository,
    ProjectRepository,
    ProjectSearchFilters,
)
from agenticwit.repositories.refresh_token import (
    RefreshTokenRepository,
    RotationOutcome,
    RotationResult,
)
from agenticwit.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "Page",
    "paginate_select",
    # Domain
    "AuditLogRepository",
    "ProjectMemberRepository",
    "ProjectRepository",
    "ProjectSearchFilters",
    "RefreshTokenRepository",
    "RotationOutcome",
    "RotationResult",
    "UserRepository",
]

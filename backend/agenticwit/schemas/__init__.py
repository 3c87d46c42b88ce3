"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AuthResultSchema,
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
)
from .common import PaginationQuerySchema, build_meta
from .project import (
    MemberAddSchema,
    MemberSchema,
    MemberUpdateSchema,
    ProjectCreateSchema,
    ProjectSchema,
    ProjectSearchQuerySchema,
    ProjectUpdateSchema,
)
from .user import ChangePasswordSchema, ProfileUpdateSchema, UserSchema

__all__ = [
    "AuthResultSchema",
    "LoginSchema",
    "LogoutSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "PaginationQuerySchema",
    "build_meta",
    "MemberAddSchema",
    "MemberSchema",
    "MemberUpdateSchema",
    "ProjectCreateSchema",
    "ProjectSchema",
    "ProjectSearchQuerySchema",
    "ProjectUpdateSchema",
    "ChangePasswordSchema",
    "ProfileUpdateSchema",
    "UserSchema",
]

"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or HTTP.
They are the stable contract between repositories, policies and application
services. Translation to RFC 7807 responses happens in
``agenticwit/core/errors.py`` via :func:`agenticwit.services._shared.base.translate_exception`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name in the message. SQLite only reports
    the offending columns, so callers pass a ``fallback`` fragment through
    :func:`violates_any` when they need both.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :type exc: IntegrityError
    :param constraint_name: Constraint name or message fragment to match.
    :type constraint_name: str
    :returns: ``True`` if the IntegrityError matches.
    :rtype: bool
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


def violates_any(exc: IntegrityError, *fragments: str) -> bool:
    """Return ``True`` when any of ``fragments`` matches the error message."""
    return any(violates(exc, fragment) for fragment in fragments)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories, policies or services.
    - ``code`` is a stable machine-readable identifier reused by the HTTP edge.
    """

    code = "bad_request"


@dataclass(frozen=True, slots=True)
class FieldIssue:
    """
    A single validation problem.

    :param field: Offending input field (``"_schema"`` for whole-object issues).
    :param reason: Human-readable reason.
    """

    field: str
    reason: str


class ValidationError(ServiceError):
    """
    Raised when input fails validation.

    Carries a structured tuple of :class:`FieldIssue` rather than a parsed string.
    """

    code = "validation_error"

    def __init__(self, issues: Iterable[FieldIssue | tuple[str, str]], message: str | None = None):
        self.issues: tuple[FieldIssue, ...] = tuple(
            i if isinstance(i, FieldIssue) else FieldIssue(*i) for i in issues
        )
        super().__init__(message or "Validation failed")

    def as_dict(self) -> dict[str, list[str]]:
        """Group reasons by field (marshmallow-style ``{"field": [reasons]}``)."""
        grouped: dict[str, list[str]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.field, []).append(issue.reason)
        return grouped


# --------------------------------------------------------------------------- #
# Lookup / conflict errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found or must not be disclosed.

    :param entity: Entity name (e.g., "Project").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int
    code = "not_found"

    def __str__(self) -> str:
        return f"{self.entity} not found"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Project").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str
    code = "conflict"

    def __str__(self) -> str:
        return self.detail


class DuplicateIdentityError(ConflictError):
    """A unique identity field (email, username, project key) is already taken."""

    code = "duplicate_identity"

    def __init__(self, entity: str, field: str, detail: str | None = None) -> None:
        super().__init__(entity=entity, detail=detail or f"{field.capitalize()} already exists")
        self.field = field


class AlreadyMemberError(ConflictError):
    """The user is already part of the project (as owner or member)."""

    code = "already_member"

    def __init__(self, detail: str = "User is already a member of this project") -> None:
        super().__init__(entity="ProjectMember", detail=detail)


# --------------------------------------------------------------------------- #
# Authentication / authorization errors
# --------------------------------------------------------------------------- #


class AuthenticationError(ServiceError):
    """Base for failures that require the caller to (re-)authenticate."""

    code = "unauthorized"


class InvalidCredentialsError(AuthenticationError):
    """Unknown email or wrong password. Both cases share one message."""

    code = "invalid_credentials"

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class MfaRequiredError(AuthenticationError):
    """The account has MFA enabled and no code was supplied."""

    code = "mfa_required"

    def __init__(self, message: str = "MFA code required") -> None:
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Token is unknown, malformed, already consumed or has a bad signature."""

    code = "invalid_token"

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    """Token was valid once but its expiry has passed."""

    code = "token_expired"

    def __init__(self, message: str = "Token expired") -> None:
        super().__init__(message)


class AccountDisabledError(ServiceError):
    """The account exists and authenticated but is deactivated."""

    code = "account_disabled"

    def __init__(self, message: str = "Account is disabled") -> None:
        super().__init__(message)


class PermissionDeniedError(ServiceError):
    """The caller can see the resource but lacks the permission for the action."""

    code = "permission_denied"

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message)


__all__ = [
    "AccountDisabledError",
    "AlreadyMemberError",
    "AuthenticationError",
    "ConflictError",
    "DuplicateIdentityError",
    "FieldIssue",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MfaRequiredError",
    "NotFoundError",
    "PermissionDeniedError",
    "ServiceError",
    "TokenExpiredError",
    "ValidationError",
    "violates",
    "violates_any",
]

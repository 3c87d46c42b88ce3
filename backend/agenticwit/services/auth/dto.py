# agenticwit/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from agenticwit.services.identity.dto import UserOut

DEFAULT_ACCESS_EXPIRES = timedelta(minutes=15)
DEFAULT_REFRESH_EXPIRES = timedelta(days=7)

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param email: Email address (normalized by the model).
    :param username: Public handle.
    :param password: Raw password, checked against the strength policy.
    :param first_name: Optional given name.
    :param last_name: Optional family name.
    """

    email: str
    username: str
    password: str
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :param password: Raw password (to be verified).
    :param mfa_code: One-time code; required when the account has MFA enabled.
    """

    email: str
    password: str
    mfa_code: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh token previously issued.
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Token to revoke; only deleted if it belongs to the caller.
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class ChangePasswordIn:
    current_password: str
    new_password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Signed access JWT.
    :param refresh_token: Opaque refresh token.
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """Identity plus the token pair issued for it."""

    user: UserOut
    tokens: TokenPairOut


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    access_expires: timedelta = DEFAULT_ACCESS_EXPIRES
    refresh_expires: timedelta = DEFAULT_REFRESH_EXPIRES

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthTokenConfig:
        """Build from Flask config keys ``JWT_ACCESS_TOKEN_EXPIRES`` / ``REFRESH_TOKEN_EXPIRES``."""
        return cls(
            access_expires=config.get("JWT_ACCESS_TOKEN_EXPIRES", DEFAULT_ACCESS_EXPIRES),
            refresh_expires=config.get("REFRESH_TOKEN_EXPIRES", DEFAULT_REFRESH_EXPIRES),
        )

"""Request-scoped values handed explicitly to services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthContext:
    """
    Verified identity of the caller, produced once per request from the access token.

    :param user_id: Authenticated user id.
    :param email: Email claim at token issue time.
    :param username: Username claim at token issue time.
    """

    user_id: int
    email: str
    username: str


@dataclass(frozen=True, slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (auth, request id, client info).

    :param auth: Authenticated caller, ``None`` for public endpoints.
    :param request_id: Correlation id for logging/tracing.
    :param ip_address: Client address recorded in audit rows.
    :param user_agent: Client user agent recorded in audit rows.
    """

    auth: AuthContext | None = None
    request_id: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    @property
    def actor_id(self) -> int | None:
        return self.auth.user_id if self.auth else None

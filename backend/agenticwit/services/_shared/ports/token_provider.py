from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

from agenticwit.services._shared.errors import InvalidTokenError, TokenExpiredError


class TokenProvider(Protocol):
    """Port for signing and verifying access tokens and minting refresh tokens."""

    def create_access_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def decode_access_token(self, token: str) -> dict[str, Any]:
        """Return verified claims.

        :raises InvalidTokenError: Bad signature, malformed or wrong token type.
        :raises TokenExpiredError: Signature fine but ``exp`` has passed.
        """
        ...

    def new_refresh_token(self) -> str:
        """Return a fresh opaque, unguessable refresh token value."""
        ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests."""

    def __init__(self, now: datetime | None = None) -> None:
        self._now = now or datetime.now(tz=UTC)
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}

    def create_access_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        self._seq += 1
        token = f"access.{identity}.{self._seq}"
        payload: dict[str, Any] = {
            "sub": str(identity),
            "type": "access",
            "exp": int((self._now + (expires_delta or timedelta(minutes=15))).timestamp()),
        }
        if additional_claims:
            payload.update(additional_claims)
        self._issued[token] = payload
        return token

    def decode_access_token(self, token: str) -> dict[str, Any]:
        payload = self._issued.get(token)
        if payload is None:
            raise InvalidTokenError()
        if payload["exp"] <= int(datetime.now(tz=UTC).timestamp()):
            raise TokenExpiredError()
        return payload

    def new_refresh_token(self) -> str:
        self._seq += 1
        return f"refresh-{self._seq}-{secrets.token_hex(8)}"

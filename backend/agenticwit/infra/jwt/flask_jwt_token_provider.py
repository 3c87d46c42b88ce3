# agenticwit/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, cast

from flask_jwt_extended import JWTManager
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import ExpiredSignatureError, PyJWTError

from agenticwit.services._shared.errors import InvalidTokenError, TokenExpiredError
from agenticwit.services._shared.ports import TokenProvider

REFRESH_TOKEN_BYTES = 64

# Message Flask-JWT-Extended puts on WrongTokenError for a refresh JWT
WRONG_TOKEN_TYPE_REASON = "Only non-refresh tokens are allowed"


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    Access tokens are HS256 JWTs signed with ``JWT_SECRET_KEY``. Refresh tokens
    are not JWTs: they are 128 hex characters of OS randomness and are only
    meaningful through the ``refresh_tokens`` table.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def create_access_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        from flask_jwt_extended import create_access_token as _create_access

        return cast(
            str,
            _create_access(
                identity=str(identity),
                additional_claims=additional_claims or {},
                expires_delta=expires_delta,
            ),
        )

    def decode_access_token(self, token: str) -> dict[str, Any]:
        from flask_jwt_extended import decode_token

        try:
            claims = cast(dict[str, Any], decode_token(token))
        except ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except (PyJWTError, JWTExtendedException) as exc:
            raise InvalidTokenError() from exc
        if claims.get("type") != "access":
            raise InvalidTokenError("Access token required")
        return claims

    def new_refresh_token(self) -> str:
        return secrets.token_hex(REFRESH_TOKEN_BYTES)


def register_jwt_callbacks(jwt: JWTManager) -> None:
    """Render Flask-JWT-Extended failures as problem+json with stable codes."""
    from agenticwit.core.errors import Unauthorized, problem_response

    def _unauthorized(message: str, code: str):
        return problem_response(Unauthorized(message, code=code).to_problem())

    @jwt.unauthorized_loader
    def _missing(reason: str):
        return _unauthorized("Missing or malformed Authorization header", "unauthorized")

    @jwt.invalid_token_loader
    def _invalid(reason: str):
        # WrongTokenError (a refresh JWT on an access route) lands here too
        if reason == WRONG_TOKEN_TYPE_REASON:
            return _unauthorized("Access token required", "invalid_token")
        return _unauthorized("Invalid token", "invalid_token")

    @jwt.expired_token_loader
    def _expired(jwt_header: dict[str, Any], jwt_payload: dict[str, Any]):
        return _unauthorized("Token expired", "token_expired")

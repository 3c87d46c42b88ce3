"""Shared API helpers: response shaping, auth context and service wiring."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from agenticwit.core.logger import ensure_request_id
from agenticwit.infra.audit import SQLAlchemyAuditSink
from agenticwit.infra.jwt import JWTTokenProvider
from agenticwit.services._shared.context import AuthContext, ServiceContext
from agenticwit.services._shared.errors import InvalidTokenError
from agenticwit.services.auth import AuthService
from agenticwit.services.auth.dto import AuthTokenConfig
from agenticwit.services.identity import UserService
from agenticwit.services.projects import ProjectMemberService, ProjectService

F = TypeVar("F", bound=Callable[..., Any])


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def no_content() -> Response:
    return Response(status=204)


def load_json(schema: Any) -> dict[str, Any]:
    """Validate the request body with ``schema``; a missing body counts as ``{}``."""

    return schema.load(request.get_json(silent=True) or {})


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


def current_auth() -> AuthContext:
    """Build the :class:`AuthContext` from the already verified access token."""

    claims = get_jwt()
    try:
        user_id = int(get_jwt_identity())
    except (TypeError, ValueError) as exc:
        raise InvalidTokenError("Invalid token subject") from exc
    return AuthContext(
        user_id=user_id,
        email=str(claims.get("email", "")),
        username=str(claims.get("username", "")),
    )


def require_auth(func: F) -> F:
    """Verify the bearer access token and pass the caller as ``auth=``.

    Missing, malformed, expired or refresh-type tokens are rejected by the
    Flask-JWT-Extended loaders before the view runs.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        kwargs["auth"] = current_auth()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# ------------------------------ Service wiring ------------------------------


def service_context(auth: AuthContext | None = None) -> ServiceContext:
    """Capture request-scoped data handed to services."""

    return ServiceContext(
        auth=auth,
        request_id=ensure_request_id(),
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )


def _service_kwargs(auth: AuthContext | None) -> dict[str, Any]:
    return {"ctx": service_context(auth), "audit_sink": SQLAlchemyAuditSink()}


def auth_service(auth: AuthContext | None = None) -> AuthService:
    return AuthService(
        token_provider=JWTTokenProvider(),
        token_cfg=AuthTokenConfig.from_mapping(current_app.config),
        **_service_kwargs(auth),
    )


def user_service(auth: AuthContext) -> UserService:
    return UserService(**_service_kwargs(auth))


def project_service(auth: AuthContext) -> ProjectService:
    return ProjectService(**_service_kwargs(auth))


def member_service(auth: AuthContext) -> ProjectMemberService:
    return ProjectMemberService(**_service_kwargs(auth))

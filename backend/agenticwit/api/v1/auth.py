"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app

from agenticwit.api.deps import (
    auth_service,
    json_response,
    load_json,
    no_content,
    require_auth,
    timing,
    user_service,
)
from agenticwit.core.extensions import limiter
from agenticwit.schemas import (
    AuthResultSchema,
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
)
from agenticwit.services._shared.context import AuthContext
from agenticwit.services.auth.dto import LoginIn, LogoutIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
auth_result_schema = AuthResultSchema()
token_pair_schema = TokenPairSchema()
user_schema = UserSchema()


def _register_rate_limit() -> str:
    return str(current_app.config.get("AUTH_REGISTER_RATE_LIMIT", "5 per 15 minutes"))


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "10 per 15 minutes"))


def _refresh_rate_limit() -> str:
    return str(current_app.config.get("AUTH_REFRESH_RATE_LIMIT", "20 per 15 minutes"))


@bp.post("/register")
@limiter.limit(_register_rate_limit)
@timing
def register():
    """Create an account and return it together with a token pair."""

    data = load_json(register_schema)
    result = auth_service().register(RegisterIn(**data))
    return json_response({"data": auth_result_schema.dump(result)}, status=201)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue a new token pair."""

    data = load_json(login_schema)
    result = auth_service().login(LoginIn(**data))
    return json_response({"data": auth_result_schema.dump(result)})


@bp.post("/refresh")
@limiter.limit(_refresh_rate_limit)
@timing
def refresh():
    """Rotate a refresh token: the presented one is consumed."""

    data = load_json(refresh_schema)
    tokens = auth_service().refresh(RefreshIn(**data))
    return json_response({"data": token_pair_schema.dump(tokens)})


@bp.post("/logout")
@require_auth
@timing
def logout(auth: AuthContext):
    """Revoke one refresh token belonging to the caller."""

    data = load_json(logout_schema)
    auth_service(auth).logout(LogoutIn(**data))
    return no_content()


@bp.get("/me")
@require_auth
@timing
def me(auth: AuthContext):
    """Return the authenticated user profile."""

    user = user_service(auth).get_me()
    return json_response({"data": user_schema.dump(user)})

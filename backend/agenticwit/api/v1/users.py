"""Endpoints for the authenticated user's own account."""

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
from agenticwit.schemas import ChangePasswordSchema, ProfileUpdateSchema, UserSchema
from agenticwit.services._shared.context import AuthContext
from agenticwit.services.auth.dto import ChangePasswordIn
from agenticwit.services.identity.dto import ProfileUpdateIn

bp = Blueprint("users", __name__)

user_schema = UserSchema()
profile_update_schema = ProfileUpdateSchema()
change_password_schema = ChangePasswordSchema()


def _password_rate_limit() -> str:
    return str(current_app.config.get("AUTH_PASSWORD_RATE_LIMIT", "5 per 15 minutes"))


@bp.patch("/me")
@require_auth
@timing
def update_me(auth: AuthContext):
    """Update name and accessibility preferences."""

    data = load_json(profile_update_schema)
    user = user_service(auth).update_profile(ProfileUpdateIn(**data))
    return json_response({"data": user_schema.dump(user)})


@bp.post("/me/password")
@limiter.limit(_password_rate_limit)
@require_auth
@timing
def change_password(auth: AuthContext):
    """Change the password. Every refresh token of the caller is revoked."""

    data = load_json(change_password_schema)
    auth_service(auth).change_password(ChangePasswordIn(**data))
    return no_content()

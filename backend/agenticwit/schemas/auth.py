"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .user import UserSchema

USERNAME_PATTERN = r"^[a-zA-Z0-9_-]+$"


class RegisterSchema(Schema):
    """Input payload for account registration.

    The password is only checked for presence here. Strength rules are
    enforced by the service so that every violated rule is reported.
    """

    email = fields.Email(required=True, validate=validate.Length(max=255))
    username = fields.String(
        required=True,
        validate=[
            validate.Length(min=3, max=30),
            validate.Regexp(
                USERNAME_PATTERN,
                error="Username can only contain letters, numbers, underscores, and hyphens",
            ),
        ],
    )
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    first_name = fields.String(load_default=None, validate=validate.Length(min=1, max=100))
    last_name = fields.String(load_default=None, validate=validate.Length(min=1, max=100))


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=255))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    mfa_code = fields.String(load_default=None, validate=validate.Length(min=1, max=16))


class RefreshSchema(Schema):
    """Input payload carrying an opaque refresh token."""

    refresh_token = fields.String(required=True, validate=validate.Length(min=1, max=255))


class LogoutSchema(RefreshSchema):
    """Input payload for revoking one refresh token of the caller."""


class TokenPairSchema(Schema):
    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.Constant("bearer")


class AuthResultSchema(Schema):
    """Response payload for register/login: identity plus tokens."""

    user = fields.Nested(UserSchema, required=True)
    tokens = fields.Nested(TokenPairSchema, required=True)

"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from agenticwit.models.user import FONT_SIZES, THEMES


class UserSchema(Schema):
    """Public representation of a user. Never exposes credentials."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    username = fields.String(required=True)
    first_name = fields.String(allow_none=True)
    last_name = fields.String(allow_none=True)
    is_active = fields.Boolean()
    email_verified = fields.Boolean()
    mfa_enabled = fields.Boolean()
    theme = fields.String()
    font_size = fields.String()
    reduce_motion = fields.Boolean()
    screen_reader_mode = fields.Boolean()
    keyboard_nav_only = fields.Boolean()
    last_login_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)


class ProfileUpdateSchema(Schema):
    """Partial profile update; omitted keys stay unchanged."""

    first_name = fields.String(validate=validate.Length(min=1, max=100))
    last_name = fields.String(validate=validate.Length(min=1, max=100))
    theme = fields.String(validate=validate.OneOf(THEMES))
    font_size = fields.String(validate=validate.OneOf(FONT_SIZES))
    reduce_motion = fields.Boolean()
    screen_reader_mode = fields.Boolean()
    keyboard_nav_only = fields.Boolean()


class ChangePasswordSchema(Schema):
    current_password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    new_password = fields.String(required=True, validate=validate.Length(min=1, max=128))

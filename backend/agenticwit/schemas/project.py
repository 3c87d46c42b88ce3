"""Project and membership schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from agenticwit.models.project import ACCESSIBILITY_LEVELS, MEMBER_ROLES

from .common import PaginationQuerySchema

KEY_REGEXP = validate.Regexp(
    r"^[A-Z][A-Z0-9]*$",
    error="Project key must start with a letter and contain only uppercase letters and numbers",
)


class ProjectCreateSchema(Schema):
    """Payload for creating a project. The caller becomes its owner."""

    key = fields.String(required=True, validate=[validate.Length(min=2, max=10), KEY_REGEXP])
    name = fields.String(required=True, validate=validate.Length(min=3, max=100))
    description = fields.String(load_default=None, validate=validate.Length(max=1000))
    is_public = fields.Boolean(load_default=False)
    accessibility_level = fields.String(
        load_default="AA", validate=validate.OneOf(ACCESSIBILITY_LEVELS)
    )
    high_contrast_mode = fields.Boolean(load_default=False)
    screen_reader_optimized = fields.Boolean(load_default=False)


class ProjectUpdateSchema(Schema):
    """Partial update. ``key`` is immutable and therefore not accepted."""

    name = fields.String(validate=validate.Length(min=3, max=100))
    description = fields.String(validate=validate.Length(max=1000))
    is_public = fields.Boolean()
    is_archived = fields.Boolean()
    accessibility_level = fields.String(validate=validate.OneOf(ACCESSIBILITY_LEVELS))
    high_contrast_mode = fields.Boolean()
    screen_reader_optimized = fields.Boolean()


class ProjectSearchQuerySchema(PaginationQuerySchema):
    """Query-string filters for ``GET /projects``."""

    class Meta:
        unknown = EXCLUDE

    query = fields.String(load_default=None, validate=validate.Length(max=100))
    is_public = fields.Boolean(load_default=None)
    is_archived = fields.Boolean(load_default=None)
    owner_id = fields.Integer(load_default=None, validate=validate.Range(min=1))


class ProjectOwnerSchema(Schema):
    id = fields.Integer()
    username = fields.String()
    first_name = fields.String(allow_none=True)
    last_name = fields.String(allow_none=True)


class ProjectSchema(Schema):
    """Project as seen by the caller, including their effective role."""

    id = fields.Integer(required=True)
    key = fields.String(required=True)
    name = fields.String(required=True)
    description = fields.String(allow_none=True)
    is_public = fields.Boolean()
    is_archived = fields.Boolean()
    accessibility_level = fields.String()
    high_contrast_mode = fields.Boolean()
    screen_reader_optimized = fields.Boolean()
    owner_id = fields.Integer()
    owner = fields.Nested(ProjectOwnerSchema, allow_none=True)
    member_count = fields.Integer()
    user_role = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class MemberAddSchema(Schema):
    user_id = fields.Integer(required=True, validate=validate.Range(min=1))
    role = fields.String(load_default="member", validate=validate.OneOf(MEMBER_ROLES))


class MemberUpdateSchema(Schema):
    role = fields.String(required=True, validate=validate.OneOf(MEMBER_ROLES))


class MemberUserSchema(Schema):
    id = fields.Integer()
    username = fields.String()
    email = fields.Email()
    first_name = fields.String(allow_none=True)
    last_name = fields.String(allow_none=True)


class MemberSchema(Schema):
    """Membership row with a summary of the member's identity."""

    id = fields.Integer(required=True)
    project_id = fields.Integer()
    user_id = fields.Integer()
    role = fields.String()
    joined_at = fields.DateTime()
    user = fields.Nested(MemberUserSchema)

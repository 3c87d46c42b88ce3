"""Project and membership endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from agenticwit.api.deps import (
    json_response,
    load_json,
    member_service,
    no_content,
    project_service,
    require_auth,
    timing,
)
from agenticwit.schemas import (
    MemberAddSchema,
    MemberSchema,
    MemberUpdateSchema,
    ProjectCreateSchema,
    ProjectSchema,
    ProjectSearchQuerySchema,
    ProjectUpdateSchema,
    build_meta,
)
from agenticwit.services._shared.context import AuthContext
from agenticwit.services.projects.dto import (
    MemberAddIn,
    MemberUpdateIn,
    ProjectCreateIn,
    ProjectSearchIn,
    ProjectUpdateIn,
)

bp = Blueprint("projects", __name__)

project_schema = ProjectSchema()
project_list_schema = ProjectSchema(many=True)
project_create_schema = ProjectCreateSchema()
project_update_schema = ProjectUpdateSchema()
project_search_schema = ProjectSearchQuerySchema()
member_schema = MemberSchema()
member_list_schema = MemberSchema(many=True)
member_add_schema = MemberAddSchema()
member_update_schema = MemberUpdateSchema()


@bp.post("")
@require_auth
@timing
def create_project(auth: AuthContext):
    """Create a project owned by the caller."""

    data = load_json(project_create_schema)
    project = project_service(auth).create(ProjectCreateIn(**data))
    return json_response({"data": project_schema.dump(project)}, status=201)


@bp.get("")
@require_auth
@timing
def search_projects(auth: AuthContext):
    """Return visible projects, newest update first."""

    args = project_search_schema.load(request.args)
    result = project_service(auth).search(ProjectSearchIn(**args))
    meta = build_meta(
        total=result.meta.total,
        page=result.meta.page,
        limit=result.meta.limit,
        total_pages=result.meta.total_pages,
    )
    return json_response({"data": project_list_schema.dump(result.items), "meta": meta})


@bp.get("/<int:project_id>")
@require_auth
@timing
def get_project(project_id: int, auth: AuthContext):
    project = project_service(auth).get(project_id)
    return json_response({"data": project_schema.dump(project)})


@bp.patch("/<int:project_id>")
@require_auth
@timing
def update_project(project_id: int, auth: AuthContext):
    data = load_json(project_update_schema)
    project = project_service(auth).update(project_id, ProjectUpdateIn(**data))
    return json_response({"data": project_schema.dump(project)})


@bp.delete("/<int:project_id>")
@require_auth
@timing
def delete_project(project_id: int, auth: AuthContext):
    """Delete a project (owner only)."""

    project_service(auth).delete(project_id)
    return no_content()


# ------------------------------- Members -----------------------------------


@bp.get("/<int:project_id>/members")
@require_auth
@timing
def list_members(project_id: int, auth: AuthContext):
    members = member_service(auth).list(project_id)
    return json_response({"data": member_list_schema.dump(members)})


@bp.post("/<int:project_id>/members")
@require_auth
@timing
def add_member(project_id: int, auth: AuthContext):
    """Add a user to the project. Needs ``manage_members``."""

    data = load_json(member_add_schema)
    member = member_service(auth).add(project_id, MemberAddIn(**data))
    return json_response({"data": member_schema.dump(member)}, status=201)


@bp.patch("/<int:project_id>/members/<int:member_id>")
@require_auth
@timing
def update_member(project_id: int, member_id: int, auth: AuthContext):
    data = load_json(member_update_schema)
    member = member_service(auth).update(project_id, member_id, MemberUpdateIn(**data))
    return json_response({"data": member_schema.dump(member)})


@bp.delete("/<int:project_id>/members/<int:member_id>")
@require_auth
@timing
def remove_member(project_id: int, member_id: int, auth: AuthContext):
    member_service(auth).remove(project_id, member_id)
    return no_content()

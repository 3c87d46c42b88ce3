"""Role resolution and the fixed permission matrix."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from agenticwit.services._shared.policies.project_access import (
    Action,
    Role,
    has_permission,
    resolve_access,
)

OWNER_ID = 1
OTHER_ID = 2


def _project(*, public: bool = False):
    return SimpleNamespace(owner_id=OWNER_ID, is_public=public)


MATRIX = {
    Role.OWNER: {Action.VIEW, Action.EDIT, Action.DELETE, Action.MANAGE_MEMBERS},
    Role.ADMIN: {Action.VIEW, Action.EDIT, Action.MANAGE_MEMBERS},
    Role.MEMBER: {Action.VIEW, Action.EDIT},
    Role.VIEWER: {Action.VIEW},
}


@pytest.mark.parametrize("role", list(Role))
@pytest.mark.parametrize("action", list(Action))
def test_permission_matrix_is_exhaustive(role, action):
    assert has_permission(role, action) is (action in MATRIX[role])


def test_admin_manages_members_but_cannot_delete():
    assert has_permission("admin", "manage_members")
    assert not has_permission("admin", "delete")


def test_member_edits_but_cannot_manage_or_delete():
    assert has_permission("member", "edit")
    assert not has_permission("member", "manage_members")
    assert not has_permission("member", "delete")


@pytest.mark.parametrize("role", [None, "superuser", ""])
def test_missing_or_unknown_role_never_has_permission(role):
    for action in Action:
        assert has_permission(role, action) is False


class TestResolveAccess:
    def test_missing_project(self):
        access = resolve_access(None, None, OWNER_ID)
        assert access.has_access is False
        assert access.exists is False
        assert access.role is None

    def test_owner_always_resolves_to_owner(self):
        access = resolve_access(_project(), None, OWNER_ID)
        assert access.has_access is True
        assert access.role is Role.OWNER
        assert access.is_owner is True

    def test_owner_wins_over_a_stray_membership_row(self):
        access = resolve_access(_project(), "viewer", OWNER_ID)
        assert access.role is Role.OWNER

    @pytest.mark.parametrize("public", [True, False])
    @pytest.mark.parametrize("stored", ["admin", "member", "viewer"])
    def test_stored_role_is_kept_regardless_of_public_flag(self, stored, public):
        access = resolve_access(_project(public=public), stored, OTHER_ID)
        assert access.has_access is True
        assert access.role == Role(stored)
        assert access.is_owner is False

    def test_public_project_gives_implicit_viewer(self):
        access = resolve_access(_project(public=True), None, OTHER_ID)
        assert access.role is Role.VIEWER
        assert access.can(Action.VIEW)
        assert not access.can(Action.EDIT)

    def test_private_project_without_membership_has_no_access(self):
        access = resolve_access(_project(public=False), None, OTHER_ID)
        assert access.has_access is False
        assert access.is_owner is False
        assert access.exists is True
        assert not access.can(Action.VIEW)

    def test_anonymous_caller_on_public_project(self):
        access = resolve_access(_project(public=True), None, None)
        assert access.role is Role.VIEWER

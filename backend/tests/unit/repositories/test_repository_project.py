"""Project lookup with membership, visibility search and member listing."""

from __future__ import annotations

import pytest

from agenticwit.repositories.project import (
    ProjectMemberRepository,
    ProjectRepository,
    ProjectSearchFilters,
)
from tests.factories.project import ProjectFactory, ProjectMemberFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def repo():
    return ProjectRepository()


class TestGetWithMembership:
    def test_missing_project(self, repo):
        assert repo.get_with_membership(999, 1) is None

    def test_returns_membership_of_the_caller_only(self, repo):
        member = ProjectMemberFactory(role="admin")
        ProjectMemberFactory(project=member.project, role="viewer")

        project, membership = repo.get_with_membership(member.project_id, member.user_id)
        assert project.id == member.project_id
        assert membership.role == "admin"

    def test_no_membership_row(self, repo):
        project = ProjectFactory()
        outsider = UserFactory()
        found, membership = repo.get_with_membership(project.id, outsider.id)
        assert found.id == project.id
        assert membership is None

    def test_anonymous_never_matches_a_row(self, repo):
        member = ProjectMemberFactory()
        _, membership = repo.get_with_membership(member.project_id, None)
        assert membership is None


class TestSearch:
    def test_visibility(self, repo):
        me = UserFactory()
        owned = ProjectFactory(owner=me)
        shared = ProjectMemberFactory(user=me, role="viewer").project
        public = ProjectFactory(is_public=True)
        ProjectFactory()  # private and unrelated

        page = repo.search(me.id, ProjectSearchFilters(), page=1, limit=10)

        roles = {p.id: role for p, role in page.items}
        assert page.total == 3
        assert roles == {owned.id: None, shared.id: "viewer", public.id: None}

    def test_query_filter_is_case_insensitive(self, repo):
        me = UserFactory()
        hit = ProjectFactory(owner=me, name="Accessibility Audit")
        ProjectFactory(owner=me, name="Billing")

        page = repo.search(me.id, ProjectSearchFilters(query="audit"), page=1, limit=10)
        assert [p.id for p, _ in page.items] == [hit.id]

    def test_query_escapes_wildcards(self, repo):
        me = UserFactory()
        ProjectFactory(owner=me, name="Plain name")
        page = repo.search(me.id, ProjectSearchFilters(query="%"), page=1, limit=10)
        assert page.total == 0

    def test_flag_and_owner_filters(self, repo):
        me = UserFactory()
        archived = ProjectFactory(owner=me, is_archived=True)
        ProjectFactory(owner=me)
        public_other = ProjectFactory(is_public=True)

        page = repo.search(me.id, ProjectSearchFilters(is_archived=True), page=1, limit=10)
        assert [p.id for p, _ in page.items] == [archived.id]

        page = repo.search(
            me.id, ProjectSearchFilters(owner_id=public_other.owner_id), page=1, limit=10
        )
        assert [p.id for p, _ in page.items] == [public_other.id]

    def test_pagination_newest_update_first(self, repo):
        me = UserFactory()
        created = [ProjectFactory(owner=me) for _ in range(5)]

        first = repo.search(me.id, ProjectSearchFilters(), page=1, limit=2)
        second = repo.search(me.id, ProjectSearchFilters(), page=2, limit=2)

        assert first.total == 5
        ids = [p.id for p, _ in first.items] + [p.id for p, _ in second.items]
        assert ids == [p.id for p in reversed(created)][:4]


class TestMembers:
    def test_member_counts(self, repo):
        project = ProjectFactory()
        ProjectMemberFactory.create_batch(2, project=project)
        empty = ProjectFactory()

        assert repo.member_counts([project.id, empty.id]) == {project.id: 2, empty.id: 0}
        assert repo.member_counts([]) == {}

    def test_list_for_project_in_join_order(self):
        project = ProjectFactory()
        first = ProjectMemberFactory(project=project)
        second = ProjectMemberFactory(project=project)
        ProjectMemberFactory()  # other project

        rows = ProjectMemberRepository().list_for_project(project.id)
        assert [m.id for m in rows] == [first.id, second.id]

    def test_get_in_project_is_scoped(self):
        member = ProjectMemberFactory()
        other_project = ProjectFactory()
        repo = ProjectMemberRepository()

        assert repo.get_in_project(member.project_id, member.id).id == member.id
        assert repo.get_in_project(other_project.id, member.id) is None

"""Unit tests for UserRepository."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from agenticwit.repositories.user import UserRepository
from tests.factories.user import UserFactory


class TestUserRepository:
    """Ensure ``UserRepository`` performs core persistence operations."""

    @pytest.fixture()
    def repo(self):
        return UserRepository()

    def test_get_by_email_is_normalized(self, repo):
        u = UserFactory(email="alice@example.com", username="alice")
        fetched = repo.get_by_email("  ALICE@example.com ")
        assert fetched is not None
        assert fetched.id == u.id

    def test_find_by_email_or_username(self, repo):
        a = UserFactory(email="a@example.com", username="Alpha")
        b = UserFactory(email="b@example.com", username="beta")

        assert [u.id for u in repo.find_by_email_or_username("A@example.com", "zzz")] == [a.id]
        assert [u.id for u in repo.find_by_email_or_username("z@example.com", "ALPHA")] == [a.id]
        both = repo.find_by_email_or_username("a@example.com", "beta")
        assert {u.id for u in both} == {a.id, b.id}
        assert repo.find_by_email_or_username("z@example.com", "zzz") == []

    def test_assign_updates_rejects_credentials(self, repo):
        u = UserFactory()
        with pytest.raises(ValueError):
            repo.assign_updates(u, {"password_hash": "x"})
        with pytest.raises(ValueError):
            repo.assign_updates(u, {"is_active": False})

    def test_assign_updates_profile_fields(self, repo, db):
        u = UserFactory()
        repo.assign_updates(u, {"theme": "dark", "reduce_motion": True})
        db.session.commit()
        assert repo.get(u.id).theme == "dark"

    def test_set_password_and_touch_last_login(self, repo, db):
        u = UserFactory()
        old_hash = u.password_hash
        repo.set_password(u, "N3w!password")
        when = datetime(2026, 5, 1, tzinfo=UTC)
        repo.touch_last_login(u, when)
        db.session.commit()

        refreshed = repo.get(u.id)
        assert refreshed.password_hash != old_hash
        assert refreshed.verify_password("N3w!password")
        assert refreshed.last_login_at.replace(tzinfo=UTC) == when

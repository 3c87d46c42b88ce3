"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from agenticwit.models import User
from agenticwit.uow import SQLAlchemyUnitOfWork
from tests.factories.user import UserFactory


def _count_users(db) -> int:
    return db.session.execute(select(func.count()).select_from(User)).scalar_one()


class TestSQLAlchemyUnitOfWorkWriter:
    def test_commits_on_success(self, db):
        """
        GIVEN a writer UoW
        WHEN a user is added inside the block and the block exits cleanly
        THEN the row is visible afterwards.
        """
        initial = _count_users(db)

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())

        assert _count_users(db) == initial + 1

    def test_rolls_back_on_exception(self, db):
        initial = _count_users(db)

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())
            raise RuntimeError("boom")

        assert _count_users(db) == initial

    def test_explicit_commit_survives_a_later_error(self, db):
        """Work committed inside the block stays even if the block then raises."""
        initial = _count_users(db)

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())
            uow.commit()
            raise RuntimeError("after commit")

        assert _count_users(db) == initial + 1

    def test_exposes_all_repositories(self):
        with SQLAlchemyUnitOfWork() as uow:
            for name in ("users", "refresh_tokens", "projects", "members", "audit_logs"):
                assert getattr(uow, name).session is uow.session

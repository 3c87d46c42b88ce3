"""Read-only Unit of Work: portable write guards (SQLite has no READ ONLY flag)."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select, text

from agenticwit.models.user import User
from agenticwit.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from agenticwit.uow import SQLAlchemyUnitOfWork as RWuow
from tests.factories.user import UserFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self):
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(UserFactory.build())
            uow.session.flush()

    def test_blocks_core_dml(self):
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(text("DELETE FROM users"))

    def test_allows_reads(self):
        UserFactory()
        with ROuow() as uow:
            count = uow.session.execute(select(func.count()).select_from(User)).scalar_one()
            assert count == 1

    def test_disallows_commit(self):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_guards_are_removed_on_exit(self):
        with ROuow():
            pass
        with RWuow() as uow:
            uow.users.add(UserFactory.build())

    def test_mutation_does_not_persist(self, db):
        user = UserFactory()
        user_id, original_email = user.id, user.email
        # End the autobegun read so the RO scope owns (and rolls back) its transaction
        db.session.commit()

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            u = uow.session.get(User, user_id)
            u.email = "mutated-in-ro@example.com"
            uow.session.flush()

        with RWuow() as uow:
            assert uow.session.get(User, user_id).email == original_email

    def test_opens_and_rolls_back_its_own_transaction_on_idle_scoped_session(self, db):
        db.session.commit()
        assert not db.session().in_transaction()

        with ROuow() as uow:
            assert uow.session().in_transaction()
            uow.session.execute(select(func.count()).select_from(User)).scalar_one()

        assert not db.session().in_transaction()

    def test_joins_a_running_transaction_and_leaves_it_open(self, db):
        user = UserFactory()
        db.session.execute(select(func.count()).select_from(User)).scalar_one()
        assert db.session().in_transaction()

        with ROuow() as uow:
            assert uow.session.get(User, user.id) is not None

        assert db.session().in_transaction()

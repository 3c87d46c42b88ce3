"""Units of Work over the Flask-SQLAlchemy scoped session."""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from agenticwit.core.extensions import db
from agenticwit.repositories import (
    AuditLogRepository,
    ProjectMemberRepository,
    ProjectRepository,
    RefreshTokenRepository,
    UserRepository,
)
from agenticwit.uow.base import UnitOfWork

log = logging.getLogger(__name__)

# First SQL keyword of statements a read-only scope refuses to send
WRITE_KEYWORDS = frozenset(
    {"insert", "update", "delete", "merge", "alter", "drop", "truncate", "create", "replace"}
)


class _SessionBound(UnitOfWork):
    """Binds every repository to one session so they share a transaction."""

    def __init__(self, session: Session | None = None) -> None:
        self.session: Session = session if session is not None else db.session
        self.users = UserRepository(self.session)
        self.refresh_tokens = RefreshTokenRepository(self.session)
        self.projects = ProjectRepository(self.session)
        self.members = ProjectMemberRepository(self.session)
        self.audit_logs = AuditLogRepository(self.session)

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyUnitOfWork(_SessionBound):
    """
    Read-write scope: commit on a clean exit, roll back on any exception.

    :meth:`commit` may also be called inside the block when a use-case has to
    persist something before it raises (a stale refresh token being purged).
    """

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()


class _WriteGuard:
    """Session and connection listeners that turn writes into ``RuntimeError``."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.connection = session.connection()

    def _before_flush(self, session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError("Read-only UnitOfWork: ORM flush blocked")

    def _before_cursor_execute(self, conn, cursor, statement, parameters, context, executemany):
        keyword = statement.lstrip().split(None, 1)[0].lower() if statement.strip() else ""
        if keyword in WRITE_KEYWORDS:
            raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked ({keyword.upper()})")

    def install(self) -> None:
        event.listen(self.session, "before_flush", self._before_flush)
        event.listen(self.connection, "before_cursor_execute", self._before_cursor_execute)

    def remove(self) -> None:
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", self._before_flush)
        with suppress(InvalidRequestError):
            event.remove(self.connection, "before_cursor_execute", self._before_cursor_execute)


class SQLAlchemyReadOnlyUnitOfWork(_SessionBound):
    """
    Read-only scope for queries.

    ORM flushes and DML/DDL statements raise while the scope is open. When
    the session is idle the scope begins (and finally rolls back) its own
    transaction, marked ``READ ONLY`` on PostgreSQL. When a transaction is
    already running it is joined and left for its owner to finish.
    """

    def __init__(self, session: Session | None = None) -> None:
        super().__init__(session)
        self._owned: SessionTransaction | None = None
        self._guard: _WriteGuard | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        try:
            self._owned = self.session.begin()
        except InvalidRequestError:
            # Already inside a transaction (autobegin); join it
            self._owned = None

        self._guard = _WriteGuard(self.session)
        if self._owned is not None and self._guard.connection.dialect.name == "postgresql":
            try:
                self.session.execute(text("SET TRANSACTION READ ONLY"))
            except SQLAlchemyError as exc:
                log.warning("uow.readonly_directive_failed", extra={"error": str(exc)})
        self._guard.install()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        guard, self._guard = self._guard, None
        if guard is not None:
            guard.remove()
        if self._owned is not None:
            owned, self._owned = self._owned, None
            if owned.is_active:
                owned.rollback()

    def commit(self) -> None:
        raise RuntimeError("Read-only UnitOfWork does not allow commit()")


def make_rw_uow() -> SQLAlchemyUnitOfWork:
    return SQLAlchemyUnitOfWork()


def make_ro_uow() -> SQLAlchemyReadOnlyUnitOfWork:
    return SQLAlchemyReadOnlyUnitOfWork()

"""Shared repository plumbing for SQLAlchemy 2.x.

Repositories only build and run statements on the session they were given.
They never commit or roll back and never decide business rules: services do
that through a Unit of Work.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from agenticwit.core.extensions import db

E = TypeVar("E")


@dataclass(slots=True)
class Page(Generic[E]):
    """One slice of a paginated query.

    :param items: Rows on this page.
    :param total: Rows matching the query across all pages.
    :param page: 1-based page number.
    :param limit: Page size.
    """

    items: Sequence[E]
    total: int
    page: int
    limit: int


def paginate_select(
    session: Session,
    stmt: Select[Any],
    *,
    page: int,
    limit: int,
    scalars: bool = True,
) -> tuple[list[Any], int]:
    """Run ``stmt`` for one page and count every matching row.

    :param session: Session to execute on.
    :param stmt: Filtered and ordered select.
    :param page: 1-based page (values below 1 read as 1).
    :param limit: Page size (values below 1 read as 1).
    :param scalars: Return the first column only instead of whole rows.
    :returns: ``(items, total)``.
    """
    page = max(int(page), 1)
    limit = max(int(limit), 1)

    # ORDER BY is irrelevant to the count and slows it down on large tables
    total = int(
        session.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
    )
    result = session.execute(stmt.limit(limit).offset((page - 1) * limit))
    items = list(result.scalars().all()) if scalars else list(result.all())
    return items, total


class BaseRepository(Generic[E]):
    """CRUD helpers for one mapped class.

    Subclasses set ``model`` and whitelist what callers may filter on
    (``_filterable_fields``) and assign (``_updatable_fields``).
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        """Session injected by the Unit of Work, else the Flask-scoped one."""
        return self._session if self._session is not None else cast(Session, db.session)

    # ------------------------------ Whitelists --------------------------------

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _updatable_fields(self) -> set[str]:
        return set()

    def _where(self, stmt: Select[Any], filters: Mapping[str, Any]) -> Select[Any]:
        allowed = self._filterable_fields()
        unknown = set(filters) - set(allowed)
        if unknown:
            raise ValueError(f"Cannot filter {self.model.__name__} on: {sorted(unknown)}")
        return stmt.where(*(allowed[k] == v for k, v in filters.items()))

    # --------------------------------- CRUD -----------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is populated."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        return self.session.get(self.model, entity_id)

    def exists(self, **filters: Any) -> bool:
        """``True`` when at least one row matches the whitelisted equality filters."""
        stmt = self._where(select(func.count()).select_from(self.model), filters)
        return bool(self.session.execute(stmt).scalar_one())

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    def assign_updates(self, instance: E, fields: Mapping[str, Any]) -> E:
        """Copy whitelisted ``fields`` onto ``instance`` and flush.

        Assignment goes through ``setattr`` so ``@validates`` hooks still run.

        :raises ValueError: If a key is not in ``_updatable_fields``.
        """
        allowed = self._updatable_fields()
        rejected = sorted(k for k in fields if k not in allowed)
        if rejected:
            raise ValueError(f"Fields not updatable on {self.model.__name__}: {rejected}")
        for key, value in fields.items():
            setattr(instance, key, value)
        self.flush()
        return instance

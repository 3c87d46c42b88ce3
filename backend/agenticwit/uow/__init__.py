"""Unit of Work abstractions and concrete implementations.

This package re-exports the SQLAlchemy-backed units of work that services
receive as factories, alongside the abstract contract they depend on.
"""

from .base import UnitOfWork, UowFactory
from .sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
    make_ro_uow,
    make_rw_uow,
)

__all__ = [
    "UnitOfWork",
    "UowFactory",
    "SQLAlchemyUnitOfWork",
    "SQLAlchemyReadOnlyUnitOfWork",
    "make_ro_uow",
    "make_rw_uow",
]

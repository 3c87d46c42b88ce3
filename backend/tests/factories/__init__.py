"""Factory Boy helpers wired to the Flask-SQLAlchemy session."""

from __future__ import annotations

import factory

from agenticwit.core.extensions import db


def _current_session():
    return db.session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class for persisted factories.

    Objects are committed so that a service rolling back its own Unit of
    Work never takes test fixtures with it. Requires an app context.
    """

    class Meta:
        abstract = True
        sqlalchemy_session_factory = _current_session
        sqlalchemy_session_persistence = "commit"

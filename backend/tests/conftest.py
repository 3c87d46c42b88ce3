"""Pytest fixtures: one fresh in-memory database per test.

Services commit for real, so isolation comes from building a new app (and
therefore a new in-memory SQLite engine) for every test rather than from
SAVEPOINT rollbacks.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import pytest
from flask import Flask
from flask.testing import FlaskClient

from agenticwit import create_app, dispose_store
from agenticwit.core.config import TestingConfig
from agenticwit.core.extensions import db as _db


@pytest.fixture()
def app() -> Generator[Flask, None, None]:
    """Create the application with :class:`TestingConfig` and an empty schema.

    Yields
    ------
    flask.Flask
        Application whose tables exist for the duration of one test.
    """
    application = create_app(TestingConfig, instance_relative_config=False)
    with application.app_context():
        _db.create_all()
    yield application
    with application.app_context():
        _db.session.remove()
        _db.drop_all()
    dispose_store(application)


@pytest.fixture()
def app_ctx(app: Flask) -> Generator[Flask, None, None]:
    """Push an application context for code that talks to the database directly."""
    with app.app_context():
        yield app


@pytest.fixture()
def db(app_ctx: Flask):
    """Flask-SQLAlchemy extension bound to the test app."""
    return _db


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a Flask test client. Each request gets its own app context."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def freeze_time() -> Callable[[Any], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2026-01-01"):
    ...         ...
    """
    from freezegun import freeze_time as _freeze_time

    def _factory(target: Any = "2026-01-01") -> Any:
        return _freeze_time(target)

    return _factory

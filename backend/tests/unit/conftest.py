"""Unit tests talk to the database and services directly inside an app context."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _unit_app_context(app_ctx):
    yield app_ctx

"""Service fixtures wired to in-memory doubles for tokens and audit."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from agenticwit.models.user import User
from agenticwit.services._shared.context import AuthContext, ServiceContext
from agenticwit.services._shared.ports import InMemoryAuditSink, StubTokenProvider


@pytest.fixture()
def audit() -> InMemoryAuditSink:
    return InMemoryAuditSink()


@pytest.fixture()
def tokens() -> StubTokenProvider:
    return StubTokenProvider()


@pytest.fixture()
def ctx_for() -> Callable[[User | None], ServiceContext]:
    """Build a :class:`ServiceContext` for ``user`` (anonymous when ``None``)."""

    def _build(user: User | None = None) -> ServiceContext:
        auth = (
            AuthContext(user_id=user.id, email=user.email, username=user.username)
            if user is not None
            else None
        )
        return ServiceContext(
            auth=auth, request_id="req-test", ip_address="10.0.0.1", user_agent="pytest"
        )

    return _build

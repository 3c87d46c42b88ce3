# tests/unit/services/test_identity_service.py
from __future__ import annotations

import pytest

from agenticwit.services._shared.errors import InvalidTokenError, NotFoundError, ValidationError
from agenticwit.services.identity.dto import ProfileUpdateIn
from agenticwit.services.identity.service import UserService
from tests.factories.user import UserFactory


@pytest.fixture()
def user():
    return UserFactory(first_name="Ada", last_name="Lovelace")


@pytest.fixture()
def service(user, ctx_for, audit) -> UserService:
    return UserService(ctx=ctx_for(user), audit_sink=audit)


def test_get_me_is_redacted(service, user):
    me = service.get_me()
    assert me.id == user.id
    assert me.email == user.email
    assert not hasattr(me, "password_hash")


def test_get_me_requires_auth(ctx_for):
    with pytest.raises(InvalidTokenError):
        UserService(ctx=ctx_for(None)).get_me()


def test_get_me_for_deleted_user(service, user, db):
    db.session.delete(user)
    db.session.commit()
    with pytest.raises(NotFoundError):
        service.get_me()


def test_update_profile_applies_only_given_fields(service, audit):
    out = service.update_profile(ProfileUpdateIn(theme="dark", reduce_motion=True))

    assert out.theme == "dark"
    assert out.reduce_motion is True
    assert out.first_name == "Ada"
    assert audit.actions() == ["USER_PROFILE_UPDATED"]
    assert audit.events[0].details == {"changes": {"theme": "dark", "reduce_motion": True}}


def test_update_profile_rejects_unknown_choices(service, audit):
    with pytest.raises(ValidationError) as excinfo:
        service.update_profile(ProfileUpdateIn(theme="neon", font_size="huge"))

    assert set(excinfo.value.as_dict()) == {"theme", "font_size"}
    assert audit.events == []
    assert service.get_me().theme == "system"

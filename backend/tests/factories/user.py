"""Factory Boy definition for :class:`agenticwit.models.user.User`."""

from __future__ import annotations

import factory

from agenticwit.core.security import hash_password
from agenticwit.models.user import User
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """
    Build persisted users.

    ``password`` is a factory parameter: it is hashed into ``password_hash``
    and never passed to the model.
    """

    class Meta:
        model = User

    class Params:
        password = DEFAULT_PASSWORD

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"user{n}")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    password_hash = factory.LazyAttribute(lambda o: hash_password(o.password))
    is_active = True

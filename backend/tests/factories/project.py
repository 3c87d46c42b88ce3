"""Factories for projects and membership rows."""

from __future__ import annotations

import factory

from agenticwit.models.project import Project, ProjectMember
from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class ProjectFactory(BaseFactory):
    class Meta:
        model = Project

    key = factory.Sequence(lambda n: f"PRJ{n}")
    name = factory.Sequence(lambda n: f"Project {n}")
    description = factory.Faker("sentence")
    is_public = False
    owner = factory.SubFactory(UserFactory)


class ProjectMemberFactory(BaseFactory):
    class Meta:
        model = ProjectMember

    project = factory.SubFactory(ProjectFactory)
    user = factory.SubFactory(UserFactory)
    role = "member"

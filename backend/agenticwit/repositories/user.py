"""User repository for identity lookups and profile persistence."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import cast

from sqlalchemy import func, or_, select

from agenticwit.models.user import User
from agenticwit.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    This repository NEVER issues tokens or evaluates password policy. It only
    looks users up and persists attribute changes.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _filterable_fields(self):
        return {
            "email": User.email,
            "username": User.username,
            "is_active": User.is_active,
        }

    def _updatable_fields(self):
        """Profile fields a user may change on themselves (never credentials)."""
        return {
            "first_name",
            "last_name",
            "theme",
            "font_size",
            "reduce_motion",
            "screen_reader_mode",
            "keyboard_nav_only",
        }

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (normalized to lowercase).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def find_by_email_or_username(self, email: str, username: str) -> Sequence[User]:
        """Return users colliding with ``email`` or ``username``.

        Email is compared after normalization and username case-insensitively,
        so ``Alice`` and ``alice`` are treated as the same handle.

        :param email: Candidate email.
        :param username: Candidate username.
        :returns: Zero, one or two users.
        """
        stmt = select(User).where(
            or_(
                User.email == email.lower().strip(),
                func.lower(User.username) == username.strip().lower(),
            )
        )
        return list(self.session.execute(stmt).scalars().all())

    def touch_last_login(self, user: User, when: datetime) -> None:
        """Record a successful login timestamp."""
        user.last_login_at = when
        self.flush()

    def set_password(self, user: User, raw: str) -> None:
        """Hash and store a new password through the model setter."""
        user.password = raw
        self.flush()

# agenticwit/services/identity/dto.py
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any

from agenticwit.models.user import User


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Redacted user representation returned by every service.

    The password hash and MFA secret are deliberately absent.
    """

    id: int
    email: str
    username: str
    first_name: str | None
    last_name: str | None
    is_active: bool
    email_verified: bool
    mfa_enabled: bool
    theme: str
    font_size: str
    reduce_motion: bool
    screen_reader_mode: bool
    keyboard_nav_only: bool
    last_login_at: datetime | None
    created_at: datetime
    updated_at: datetime


def user_to_out(user: User) -> UserOut:
    """Copy the public columns of ``user`` into a :class:`UserOut`."""
    return UserOut(**{f.name: getattr(user, f.name) for f in fields(UserOut)})


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Partial profile update; ``None`` means "leave unchanged".

    :param first_name: Given name.
    :param last_name: Family name.
    :param theme: ``light`` | ``dark`` | ``high-contrast`` | ``system``.
    :param font_size: ``small`` | ``medium`` | ``large``.
    """

    first_name: str | None = None
    last_name: str | None = None
    theme: str | None = None
    font_size: str | None = None
    reduce_motion: bool | None = None
    screen_reader_mode: bool | None = None
    keyboard_nav_only: bool | None = None

    def changes(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

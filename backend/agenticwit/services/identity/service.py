# agenticwit/services/identity/service.py
from __future__ import annotations

import logging

from agenticwit.models.user import FONT_SIZES, THEMES
from agenticwit.services._shared.base import BaseService
from agenticwit.services._shared.errors import FieldIssue, NotFoundError, ValidationError
from agenticwit.services.identity.dto import ProfileUpdateIn, UserOut, user_to_out

log = logging.getLogger(__name__)


class UserService(BaseService):
    """Read and update the authenticated user's own profile."""

    def get_me(self) -> UserOut:
        """
        Return the caller's redacted identity.

        :raises NotFoundError: If the token outlived its user.
        """
        auth = self.require_auth()
        with self.ro_uow() as uow:
            user = uow.users.get(auth.user_id)
            if user is None:
                raise NotFoundError("User", auth.user_id)
            return user_to_out(user)

    def update_profile(self, dto: ProfileUpdateIn) -> UserOut:
        """
        Apply a partial profile update for the caller.

        :param dto: Fields to change; ``None`` values are ignored.
        :returns: Updated, redacted identity.
        :raises ValidationError: For an unknown theme or font size.
        """
        auth = self.require_auth()
        changes = dto.changes()
        issues: list[FieldIssue] = []
        if "theme" in changes and changes["theme"] not in THEMES:
            issues.append(FieldIssue("theme", f"Must be one of: {', '.join(THEMES)}"))
        if "font_size" in changes and changes["font_size"] not in FONT_SIZES:
            issues.append(FieldIssue("font_size", f"Must be one of: {', '.join(FONT_SIZES)}"))
        if issues:
            raise ValidationError(issues)

        with self.rw_uow() as uow:
            user = uow.users.get(auth.user_id)
            if user is None:
                raise NotFoundError("User", auth.user_id)
            uow.users.assign_updates(user, changes)
            out = user_to_out(user)

        log.info("user.profile_updated", extra={"actor_id": auth.user_id})
        self.record_audit("USER_PROFILE_UPDATED", "user", details={"changes": changes})
        return out

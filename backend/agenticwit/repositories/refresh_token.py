"""Refresh token repository implementing single-use rotation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import cast

from sqlalchemy import delete, func, select

from agenticwit.models.refresh_token import RefreshToken
from agenticwit.repositories.base import BaseRepository


class RotationResult(Enum):
    """Outcome of an atomic refresh rotation attempt."""

    OK = auto()
    NOT_FOUND = auto()
    EXPIRED = auto()


@dataclass(frozen=True, slots=True)
class RotationOutcome:
    """
    Result of :meth:`RefreshTokenRepository.rotate`.

    :ivar result: Rotation status.
    :ivar user_id: Owner of the presented token, when it existed.
    """

    result: RotationResult
    user_id: int | None = None


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence for opaque refresh tokens.

    Notes
    -----
    Rotation relies on the row count of ``DELETE ... WHERE id = :id``. Two
    transactions presenting the same token can both read the row, but only one
    delete affects a row; the loser sees ``rowcount == 0`` and reports
    ``NOT_FOUND``.
    """

    model = RefreshToken

    def _filterable_fields(self):
        return {"user_id": RefreshToken.user_id, "token": RefreshToken.token}

    def get_by_token(self, token: str) -> RefreshToken | None:
        stmt = select(RefreshToken).where(RefreshToken.token == token)
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def issue(self, *, user_id: int, token: str, expires_at: datetime) -> RefreshToken:
        """Persist a new refresh token for ``user_id``."""
        return self.add(RefreshToken(user_id=user_id, token=token, expires_at=expires_at))

    def rotate(
        self,
        token: str,
        *,
        new_token: str,
        new_expires_at: datetime,
        now: datetime,
    ) -> RotationOutcome:
        """
        Consume ``token`` and persist ``new_token`` for the same user.

        Expired tokens are deleted and reported as ``EXPIRED``; the caller must
        still commit so the stale row is gone.

        :param token: Presented refresh token.
        :param new_token: Replacement value.
        :param new_expires_at: Expiry of the replacement.
        :param now: Reference time for the expiry check.
        :returns: :class:`RotationOutcome`.
        """
        current = self.get_by_token(token)
        if current is None:
            return RotationOutcome(RotationResult.NOT_FOUND)

        user_id = current.user_id
        consumed = self._delete_by_id(current.id)
        if consumed == 0:
            return RotationOutcome(RotationResult.NOT_FOUND)
        if current.is_expired(now):
            return RotationOutcome(RotationResult.EXPIRED, user_id)

        self.issue(user_id=user_id, token=new_token, expires_at=new_expires_at)
        return RotationOutcome(RotationResult.OK, user_id)

    def delete_for_user(self, token: str, user_id: int) -> int:
        """Delete ``token`` only when it belongs to ``user_id``. Returns rows removed."""
        stmt = delete(RefreshToken).where(
            RefreshToken.token == token, RefreshToken.user_id == user_id
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def delete_all_for_user(self, user_id: int) -> int:
        """Delete every refresh token of ``user_id``. Returns rows removed."""
        stmt = delete(RefreshToken).where(RefreshToken.user_id == user_id)
        return int(self.session.execute(stmt).rowcount or 0)

    def count_expired(self, now: datetime) -> int:
        stmt = select(func.count()).select_from(RefreshToken).where(RefreshToken.expires_at <= now)
        return int(self.session.execute(stmt).scalar_one())

    def prune_expired(self, now: datetime) -> int:
        """Delete tokens whose expiry is at or before ``now``."""
        # Loaded rows may hold naive datetimes (SQLite); skip in-session evaluation
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def _delete_by_id(self, token_id: int) -> int:
        stmt = delete(RefreshToken).where(RefreshToken.id == token_id)
        return int(self.session.execute(stmt).rowcount or 0)

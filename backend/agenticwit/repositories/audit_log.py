"""Audit log repository (append and read back)."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select

from agenticwit.models.audit_log import AuditLog
from agenticwit.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    """Append-only persistence for :class:`AuditLog`."""

    model = AuditLog

    def _filterable_fields(self):
        return {"user_id": AuditLog.user_id, "action": AuditLog.action}

    def list_for_user(self, user_id: int) -> Sequence[AuditLog]:
        """Entries written on behalf of ``user_id``, oldest first."""
        stmt = (
            select(AuditLog)
            .where(AuditLog.user_id == user_id)
            .order_by(AuditLog.created_at.asc(), AuditLog.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

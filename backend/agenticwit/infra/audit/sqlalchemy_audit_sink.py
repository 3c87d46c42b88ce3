"""Audit sink persisting events to the ``audit_logs`` table."""

from __future__ import annotations

from dataclasses import dataclass

from agenticwit.models.audit_log import AuditLog
from agenticwit.services._shared.ports import AuditEvent, AuditSink
from agenticwit.uow import UowFactory, make_rw_uow


@dataclass(slots=True)
class SQLAlchemyAuditSink(AuditSink):
    """
    Write each event in its own short transaction.

    Callers run this after their primary commit, so a failure here never
    rolls back the audited change. Errors propagate to
    :meth:`BaseService.record_audit`, which logs and drops them.
    """

    uow_factory: UowFactory = make_rw_uow

    def record(self, event: AuditEvent) -> None:
        with self.uow_factory() as uow:
            uow.audit_logs.add(
                AuditLog(
                    user_id=event.user_id,
                    action=event.action,
                    resource=event.resource,
                    details=dict(event.details),
                    ip_address=event.ip_address,
                    user_agent=(event.user_agent or "")[:512] or None,
                )
            )

# agenticwit/services/_shared/base.py
from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from agenticwit.core import errors as api_errors
from agenticwit.services._shared.context import AuthContext, ServiceContext
from agenticwit.services._shared.errors import (
    AccountDisabledError,
    AuthenticationError,
    ConflictError,
    InvalidTokenError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationError,
)
from agenticwit.services._shared.ports.audit_sink import AuditEvent, AuditSink
from agenticwit.uow import UowFactory, make_ro_uow, make_rw_uow

log = logging.getLogger(__name__)


def translate_exception(exc: ServiceError) -> api_errors.APIError:
    """
    Map a service-level error to its HTTP counterpart.

    :param exc: Error raised within a service.
    :returns: API error carrying status, stable ``code`` and safe message.
    """
    if isinstance(exc, ValidationError):
        return api_errors.UnprocessableEntity(str(exc), details={"errors": exc.as_dict()})

    if isinstance(exc, NotFoundError):
        return api_errors.NotFound(str(exc))

    if isinstance(exc, ConflictError):
        details = {"field": exc.field} if getattr(exc, "field", None) else None
        return api_errors.Conflict(str(exc), code=exc.code, details=details)

    if isinstance(exc, AuthenticationError):
        return api_errors.Unauthorized(str(exc), code=exc.code)

    if isinstance(exc, AccountDisabledError | PermissionDeniedError):
        return api_errors.Forbidden(str(exc), code=exc.code)

    return api_errors.APIError(message=str(exc), status_code=400, code=exc.code)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Open read-only and read-write units of work from injected factories.
    * Forward best-effort audit events.
    * Offer shared helpers (pagination clamping, clock, auth guard).

    Notes
    -----
    - Services never touch the global session; always use a Unit of Work.
    - Audit events are recorded *after* the primary transaction commits.
    """

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        rw_uow_factory: UowFactory | None = None,
        ro_uow_factory: UowFactory | None = None,
        audit_sink: AuditSink | None = None,
    ) -> None:
        """
        Initialize the base service.

        :param ctx: Request-scoped context (auth, request id, client info).
        :param rw_uow_factory: Callable returning a read-write UoW.
        :param ro_uow_factory: Callable returning a read-only UoW.
        :param audit_sink: Destination for audit events; ``None`` disables auditing.
        """
        self.ctx = ctx or ServiceContext()
        self._rw_uow_factory = rw_uow_factory or make_rw_uow
        self._ro_uow_factory = ro_uow_factory or make_ro_uow
        self.audit_sink = audit_sink

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> Any:
        """Create a read-write Unit of Work."""
        return self._rw_uow_factory()

    def ro_uow(self) -> Any:
        """Create a read-only Unit of Work."""
        return self._ro_uow_factory()

    # ----------------------- Shared helpers ---------------------------------

    def require_auth(self) -> AuthContext:
        """Return the caller's :class:`AuthContext` or fail with 401."""
        if self.ctx.auth is None:
            raise InvalidTokenError("Authentication required")
        return self.ctx.auth

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)

    @staticmethod
    def ensure_pagination(*, page: int, limit: int, max_limit: int = 100) -> tuple[int, int]:
        """Clamp ``page >= 1`` and ``1 <= limit <= max_limit``."""
        return max(1, int(page)), min(max(1, int(limit)), max_limit)

    # -------------------------- Audit ---------------------------------------

    def record_audit(
        self,
        action: str,
        resource: str,
        *,
        user_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Forward an audit event to the sink without ever failing the caller.

        :param action: Event name (``USER_LOGIN``, ``PROJECT_CREATED``...).
        :param resource: Resource kind (``user`` or ``project``).
        :param user_id: Acting user; defaults to the authenticated caller.
        :param details: JSON-serializable context.
        """
        if self.audit_sink is None:
            return
        event = AuditEvent(
            action=action,
            resource=resource,
            user_id=user_id if user_id is not None else self.ctx.actor_id,
            details=details or {},
            ip_address=self.ctx.ip_address,
            user_agent=self.ctx.user_agent,
        )
        try:
            self.audit_sink.record(event)
        except Exception:
            log.warning(
                "audit.record_failed",
                exc_info=True,
                extra={"action": action, "actor_id": event.user_id},
            )


__all__ = ["BaseService", "translate_exception"]

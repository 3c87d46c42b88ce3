from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class AuditEvent:
    """
    Security-relevant event to persist.

    :ivar action: Event name such as ``USER_LOGIN`` or ``PROJECT_DELETED``.
    :ivar resource: Affected resource kind (``user``, ``project``).
    :ivar user_id: Acting user, when known.
    :ivar details: JSON-serializable context.
    :ivar ip_address: Client address from the request context.
    :ivar user_agent: Client user agent from the request context.
    """

    action: str
    resource: str
    user_id: int | None = None
    details: dict[str, Any] = field(default_factory=dict)
    ip_address: str | None = None
    user_agent: str | None = None


class AuditSink(Protocol):
    """Fire-and-forget audit writer. Callers never rely on its success."""

    def record(self, event: AuditEvent) -> None: ...


class InMemoryAuditSink(AuditSink):
    """Collect events in a list; optionally fail to exercise the best-effort path."""

    def __init__(self, *, fail: bool = False) -> None:
        self.events: list[AuditEvent] = []
        self.fail = fail

    def record(self, event: AuditEvent) -> None:
        if self.fail:
            raise RuntimeError("audit sink unavailable")
        self.events.append(event)

    def actions(self) -> list[str]:
        return [e.action for e in self.events]

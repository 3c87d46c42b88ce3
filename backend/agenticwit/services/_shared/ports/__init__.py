"""
agenticwit.services._shared.ports
=================================

*Ports* (hexagonal interfaces) that keep the service layer independent from
token signing and audit persistence.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider`, the signing/verification contract, plus the
    deterministic :class:`~.StubTokenProvider` used by unit tests.

- :mod:`audit_sink`:
    :class:`~.AuditSink`, the fire-and-forget audit contract, plus
    :class:`~.InMemoryAuditSink` for tests.

Concrete adapters live under ``agenticwit.infra``.
"""

from __future__ import annotations

from .audit_sink import AuditEvent, AuditSink, InMemoryAuditSink
from .token_provider import StubTokenProvider, TokenProvider

__all__ = [
    "AuditEvent",
    "AuditSink",
    "InMemoryAuditSink",
    "StubTokenProvider",
    "TokenProvider",
]

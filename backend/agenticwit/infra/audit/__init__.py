from .sqlalchemy_audit_sink import SQLAlchemyAuditSink

__all__ = ["SQLAlchemyAuditSink"]

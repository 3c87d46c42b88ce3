"""JSON log lines tagged with the id of the request that produced them."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
# Inbound headers checked in order; the first non-empty one wins
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# ``extra=`` keys copied onto the JSON line
STRUCTURED_FIELDS = (
    "endpoint",
    "elapsed_ms",
    "actor_id",
    "user_id",
    "project_id",
    "member_id",
    "action",
    "count",
)


def ensure_request_id() -> str:
    """
    Return the id of the current request, assigning one on first use.

    Outside a request every call returns a fresh id, so background log lines
    are never grouped together by accident.
    """
    if not has_request_context():
        return uuid4().hex
    rid = g.get("request_id")
    if rid is None:
        inbound = (request.headers.get(h, "").strip() for h in INBOUND_ID_HEADERS)
        rid = next((value for value in inbound if value), None) or uuid4().hex
        g.request_id = rid
    return rid


class RequestIdFilter(logging.Filter):
    """Stamp ``record.request_id`` (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        line.update(
            (field, getattr(record, field)) for field in STRUCTURED_FIELDS if hasattr(record, field)
        )
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


def configure_logging(level: str | int = "INFO") -> None:
    """Replace root handlers with a single JSON handler on stdout.

    :param level: Level name (case-insensitive) or number. Unknown names fall
        back to ``INFO``.
    """
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


def init_app(app: Flask) -> None:
    """Assign a request id before every request and echo it on the response."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _assign_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["JSONFormatter", "RequestIdFilter", "configure_logging", "ensure_request_id", "init_app"]

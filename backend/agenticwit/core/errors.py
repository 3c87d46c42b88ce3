"""RFC 7807 ``application/problem+json`` responses for every API failure.

Each body carries ``type``, ``title``, ``status``, ``detail`` and ``instance``
plus two extensions: a stable machine ``code`` and the ``request_id`` of the
failing request.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from flask_limiter.errors import RateLimitExceeded
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from agenticwit.core.logger import ensure_request_id
from agenticwit.services._shared.errors import ServiceError

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

# Fallback ``code`` for statuses raised without a more specific one
STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    422: "validation_error",
    429: "too_many_requests",
    500: "internal_server_error",
    503: "service_unavailable",
}


def build_problem(
    status: int,
    code: str,
    detail: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Assemble a problem document for the current request.

    :param status: HTTP status.
    :param code: Stable error code clients can branch on.
    :param detail: Human-readable message, safe to show.
    :param details: Optional structured payload (field errors, conflicting field).
    """
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": detail,
        "instance": request.path if request else None,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    return body


def problem_response(problem: dict[str, Any]) -> Response:
    resp = jsonify(problem)
    resp.status_code = problem["status"]
    resp.mimetype = PROBLEM_MIMETYPE
    return resp


class APIError(Exception):
    """
    Error that already knows its HTTP shape.

    Parameters
    ----------
    message : str
        Client-safe description.
    status_code : int
        HTTP status, 400 unless a subclass says otherwise.
    code : str, optional
        Stable identifier; defaults to the generic code of ``status_code``.
    details : dict, optional
        Structured payload copied into the problem body.
    """

    status_code: int = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = int(status_code)
        self.code = code or STATUS_CODES.get(self.status_code, "error")
        self.details = details or {}

    def to_problem(self) -> dict[str, Any]:
        return build_problem(self.status_code, self.code, self.message, self.details or None)


class Unauthorized(APIError):
    status_code = HTTPStatus.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized", code: str | None = None) -> None:
        super().__init__(message, code=code)


class Forbidden(APIError):
    status_code = HTTPStatus.FORBIDDEN

    def __init__(self, message: str = "Forbidden", code: str | None = None) -> None:
        super().__init__(message, code=code)


class NotFound(APIError):
    """Missing resource, or one the caller must not learn exists."""

    status_code = HTTPStatus.NOT_FOUND

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class Conflict(APIError):
    status_code = HTTPStatus.CONFLICT

    def __init__(
        self,
        message: str = "Conflict",
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class UnprocessableEntity(APIError):
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY

    def __init__(
        self, message: str = "Validation failed", details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, details=details)


def _emit(problem: dict[str, Any], *, source: str, exc_info: bool = False) -> Response:
    """Log one line per failed request and render it. 5xx are errors, the rest warnings."""
    level = logging.ERROR if problem["status"] >= 500 else logging.WARNING
    log.log(
        level,
        "%s: status=%s code=%s detail=%s request_id=%s",
        source,
        problem["status"],
        problem["code"],
        problem["detail"],
        problem["request_id"],
        exc_info=exc_info,
    )
    return problem_response(problem)


def init_app(app: Flask) -> None:
    """Register the problem+json handlers.

    Service errors go through ``translate_exception``. Database errors that
    reach this point were not mapped by a service and are reported generically.
    Unexpected exceptions never leak their message.
    """
    from agenticwit.services._shared.base import translate_exception

    @app.errorhandler(APIError)
    def _api_error(err: APIError):
        return _emit(err.to_problem(), source="APIError")

    @app.errorhandler(ServiceError)
    def _service_error(err: ServiceError):
        return _emit(translate_exception(err).to_problem(), source=type(err).__name__)

    @app.errorhandler(MarshmallowValidationError)
    def _schema_error(err: MarshmallowValidationError):
        problem = build_problem(422, "validation_error", "Validation failed", {"errors": err.messages})
        return _emit(problem, source="SchemaValidation")

    @app.errorhandler(RateLimitExceeded)
    def _rate_limited(err: RateLimitExceeded):
        problem = build_problem(
            429,
            "too_many_requests",
            "Too many requests, please try again later",
            {"limit": str(err.description)},
        )
        return _emit(problem, source="RateLimit")

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        status = err.code or 500
        if status == 404:
            detail = f"Route '{request.path}' not found"
        else:
            detail = (err.description or HTTPStatus(status).phrase).strip()
        problem = build_problem(status, STATUS_CODES.get(status, "error"), detail)
        return _emit(problem, source="HTTPException")

    @app.errorhandler(IntegrityError)
    def _integrity_error(err: IntegrityError):
        return _emit(
            build_problem(409, "conflict", "Resource conflict"), source="IntegrityError", exc_info=True
        )

    @app.errorhandler(OperationalError)
    def _store_unavailable(err: OperationalError):
        problem = build_problem(503, "service_unavailable", "Service temporarily unavailable")
        return _emit(problem, source="OperationalError", exc_info=True)

    @app.errorhandler(Exception)
    def _unexpected(err: Exception):
        problem = build_problem(500, "internal_server_error", "Unexpected error")
        return _emit(problem, source="Unhandled", exc_info=True)

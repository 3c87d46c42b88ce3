# tests/unit/services/test_base_service.py
from __future__ import annotations

import logging

import pytest

from agenticwit.core import errors as api_errors
from agenticwit.services._shared.base import BaseService, translate_exception
from agenticwit.services._shared.context import AuthContext, ServiceContext
from agenticwit.services._shared.errors import (
    AccountDisabledError,
    AlreadyMemberError,
    ConflictError,
    DuplicateIdentityError,
    FieldIssue,
    InvalidCredentialsError,
    InvalidTokenError,
    MfaRequiredError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    TokenExpiredError,
    ValidationError,
)
from agenticwit.services._shared.ports import InMemoryAuditSink


@pytest.mark.parametrize(
    ("exc", "status", "code"),
    [
        (ValidationError([FieldIssue("email", "bad")]), 422, "validation_error"),
        (NotFoundError("Project", 1), 404, "not_found"),
        (ConflictError("Project", "clash"), 409, "conflict"),
        (DuplicateIdentityError("User", "email"), 409, "duplicate_identity"),
        (AlreadyMemberError(), 409, "already_member"),
        (InvalidCredentialsError(), 401, "invalid_credentials"),
        (MfaRequiredError(), 401, "mfa_required"),
        (InvalidTokenError(), 401, "invalid_token"),
        (TokenExpiredError(), 401, "token_expired"),
        (AccountDisabledError(), 403, "account_disabled"),
        (PermissionDeniedError(), 403, "permission_denied"),
        (ServiceError("odd"), 400, "bad_request"),
    ],
)
def test_translate_exception(exc, status, code):
    api_err = translate_exception(exc)
    assert isinstance(api_err, api_errors.APIError)
    assert (api_err.status_code, api_err.code) == (status, code)


def test_validation_details_are_grouped_by_field():
    exc = ValidationError([("password", "too short"), ("password", "no digit"), ("email", "bad")])
    api_err = translate_exception(exc)
    assert api_err.details == {
        "errors": {"password": ["too short", "no digit"], "email": ["bad"]}
    }


def test_duplicate_identity_exposes_field():
    api_err = translate_exception(DuplicateIdentityError("Project", "key", "Project key already exists"))
    assert api_err.details == {"field": "key"}
    assert api_err.message == "Project key already exists"


def test_not_found_message_hides_key():
    assert translate_exception(NotFoundError("Project", 42)).message == "Project not found"


def test_require_auth():
    with pytest.raises(InvalidTokenError):
        BaseService().require_auth()
    auth = AuthContext(user_id=1, email="a@x.com", username="a")
    assert BaseService(ctx=ServiceContext(auth=auth)).require_auth() is auth


@pytest.mark.parametrize(
    ("page", "limit", "expected"),
    [(0, 0, (1, 1)), (-3, 20, (1, 20)), (2, 500, (2, 100)), (5, 50, (5, 50))],
)
def test_ensure_pagination(page, limit, expected):
    assert BaseService.ensure_pagination(page=page, limit=limit) == expected


def test_record_audit_fills_context():
    sink = InMemoryAuditSink()
    ctx = ServiceContext(
        auth=AuthContext(user_id=7, email="a@x.com", username="a"),
        ip_address="192.0.2.1",
        user_agent="curl/8",
    )
    BaseService(ctx=ctx, audit_sink=sink).record_audit("PROJECT_CREATED", "project", details={"k": 1})

    [event] = sink.events
    assert (event.user_id, event.ip_address, event.user_agent) == (7, "192.0.2.1", "curl/8")
    assert event.details == {"k": 1}


def test_record_audit_swallows_sink_failure(caplog):
    service = BaseService(audit_sink=InMemoryAuditSink(fail=True))
    with caplog.at_level(logging.WARNING, logger="agenticwit.services._shared.base"):
        service.record_audit("USER_LOGIN", "user", user_id=3)
    assert "audit.record_failed" in caplog.text


def test_record_audit_without_sink_is_noop():
    BaseService().record_audit("USER_LOGIN", "user")

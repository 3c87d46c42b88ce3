"""Tiny helpers shared across test modules."""

from __future__ import annotations

from typing import Any

from flask.testing import FlaskClient

STRONG_PASSWORD = "Str0ng!Pass"


def bearer(token: str) -> dict[str, str]:
    """Authorization header for ``token``."""
    return {"Authorization": f"Bearer {token}"}


def register(
    client: FlaskClient,
    *,
    email: str,
    username: str,
    password: str = STRONG_PASSWORD,
    **extra: Any,
) -> dict[str, Any]:
    """Register through the API and return the ``data`` envelope.

    Raises
    ------
    AssertionError
        If registration does not return ``201``.
    """
    resp = client.post(
        "/api/v1/auth/register",
        json={"email": email, "username": username, "password": password, **extra},
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


def problem(resp) -> dict[str, Any]:
    """Return the problem+json body after checking its media type."""
    assert resp.mimetype == "application/problem+json"
    return resp.get_json()

"""Cross-origin policy for the JSON API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS


def parse_origins(raw: str | None) -> list[str] | None:
    """
    Split a comma-separated ``CORS_ORIGINS`` value.

    :returns: Explicit origins, or ``None`` when any origin is allowed
        (blank value or ``*``).
    """
    origins = [part.strip() for part in (raw or "").split(",") if part.strip()]
    if not origins or "*" in origins:
        return None
    return origins


def init_app(app: Flask) -> None:
    """Apply CORS to ``/api/*``.

    Credentials (cookies, ``Authorization`` from browsers) are only allowed
    with an explicit origin list; a wildcard policy never sends them.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    CORS(
        app,
        resources={r"/api/*": {"origins": origins or "*"}},
        supports_credentials=origins is not None,
        expose_headers=["X-Request-ID"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )

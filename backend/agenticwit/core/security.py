"""Password hashing helpers on top of :mod:`werkzeug.security`."""

from __future__ import annotations

from flask import current_app, has_app_context
from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_HASH_METHOD = "scrypt"


def _hash_method() -> str:
    if has_app_context():
        return str(current_app.config.get("PASSWORD_HASH_METHOD", DEFAULT_HASH_METHOD))
    return DEFAULT_HASH_METHOD


def hash_password(raw: str) -> str:
    """
    Hash ``raw`` with a per-call random salt.

    Hashing the same password twice yields two different strings; both verify.

    :param raw: Plain text password.
    :returns: Encoded hash including method and salt.
    """
    return generate_password_hash(raw, method=_hash_method())


def verify_password(password_hash: str | None, raw: str) -> bool:
    """Return ``True`` when ``raw`` matches ``password_hash``."""
    if not password_hash:
        return False
    return bool(check_password_hash(password_hash, raw))

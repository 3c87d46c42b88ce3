"""Password strength policy."""

from __future__ import annotations

import re

from agenticwit.services._shared.errors import FieldIssue, ValidationError

MIN_LENGTH = 8

# (predicate, reason) pairs evaluated in order; every failing rule is reported
PASSWORD_RULES: tuple[tuple[re.Pattern[str] | None, str], ...] = (
    (None, f"Password must be at least {MIN_LENGTH} characters"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must contain at least one special character"),
)


def check_password_strength(raw: str) -> list[str]:
    """
    Return every violated rule for ``raw`` (empty list when acceptable).

    :param raw: Candidate password.
    :returns: Human-readable reasons, one per failing rule.
    """
    reasons: list[str] = []
    for pattern, reason in PASSWORD_RULES:
        if pattern is None:
            if len(raw) < MIN_LENGTH:
                reasons.append(reason)
        elif not pattern.search(raw):
            reasons.append(reason)
    return reasons


def ensure_password_strength(raw: str, *, field: str = "password") -> None:
    """Raise :class:`ValidationError` listing all failing rules for ``field``."""
    reasons = check_password_strength(raw)
    if reasons:
        raise ValidationError(FieldIssue(field, r) for r in reasons)

"""Tests for the password strength policy."""

from __future__ import annotations

import pytest

from agenticwit.services._shared.errors import ValidationError
from agenticwit.services._shared.policies.password import (
    check_password_strength,
    ensure_password_strength,
)


def test_strong_password_has_no_violations():
    assert check_password_strength("Str0ng!Pass") == []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Sh0rt!", {"at least 8 characters"}),
        ("NOLOWER1!", {"lowercase"}),
        ("noupper1!", {"uppercase"}),
        ("NoDigits!!", {"number"}),
        ("NoSpecial11", {"special character"}),
    ],
)
def test_each_rule_reports_its_own_reason(raw, expected):
    reasons = check_password_strength(raw)
    assert len(reasons) == len(expected)
    for fragment in expected:
        assert any(fragment in r for r in reasons)


def test_weak_password_reports_every_violated_rule():
    reasons = check_password_strength("abc")
    # too short, no uppercase, no digit, no special character
    assert len(reasons) == 4
    assert len(set(reasons)) == 4


def test_empty_password_violates_all_rules():
    assert len(check_password_strength("")) == 5


def test_ensure_raises_with_field_issues():
    with pytest.raises(ValidationError) as excinfo:
        ensure_password_strength("password", field="new_password")

    err = excinfo.value
    assert {i.field for i in err.issues} == {"new_password"}
    assert len(err.as_dict()["new_password"]) == 3


def test_ensure_accepts_strong_password():
    ensure_password_strength("C0rrect-Horse")

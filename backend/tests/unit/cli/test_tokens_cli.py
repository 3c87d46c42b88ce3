# tests/unit/cli/test_tokens_cli.py
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from agenticwit.models.refresh_token import RefreshToken
from tests.factories.refresh_token import RefreshTokenFactory


@pytest.fixture()
def tokens(db):
    past = datetime.now(UTC) - timedelta(days=1)
    RefreshTokenFactory(expires_at=past)
    RefreshTokenFactory(expires_at=past)
    return RefreshTokenFactory()


def test_prune_deletes_only_expired(app, db, tokens):
    live_value = tokens.token

    result = app.test_cli_runner().invoke(args=["tokens", "prune"])

    assert result.exit_code == 0, result.output
    assert "Deleted 2 expired refresh token(s)." in result.output
    remaining = db.session.query(RefreshToken).all()
    assert [t.token for t in remaining] == [live_value]


def test_dry_run_keeps_rows(app, db, tokens):
    result = app.test_cli_runner().invoke(args=["tokens", "prune", "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "2 expired refresh token(s) would be deleted." in result.output
    assert db.session.query(RefreshToken).count() == 3


def test_nothing_to_prune(app, db):
    result = app.test_cli_runner().invoke(args=["tokens", "prune"])
    assert "Deleted 0 expired refresh token(s)." in result.output

"""Flask CLI commands for refresh-token maintenance."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import click
from flask.cli import with_appcontext

from agenticwit.uow import make_rw_uow

LOGGER = logging.getLogger(__name__)


@click.group("tokens")
def tokens_cli() -> None:
    """Refresh-token maintenance commands."""


@tokens_cli.command("prune")
@with_appcontext
@click.option("--dry-run", is_flag=True, help="Report the count without deleting.")
def prune(dry_run: bool) -> None:
    """Delete refresh tokens whose expiry has passed.

    Rotation only removes a stale token when somebody presents it, so
    abandoned sessions accumulate until this command runs.
    """
    now = datetime.now(UTC)
    with make_rw_uow() as uow:
        if dry_run:
            count = uow.refresh_tokens.count_expired(now)
            uow.rollback()
            click.echo(f"{count} expired refresh token(s) would be deleted.")
            return
        count = uow.refresh_tokens.prune_expired(now)

    LOGGER.info("tokens.pruned", extra={"count": count})
    click.echo(f"Deleted {count} expired refresh token(s).")

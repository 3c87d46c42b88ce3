"""``flask`` sub-commands for operating the service."""

from __future__ import annotations

from flask import Flask

from .tokens import tokens_cli


def init_app(app: Flask) -> None:
    app.cli.add_command(tokens_cli)

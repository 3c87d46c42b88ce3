"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from agenticwit.core.config import BaseConfig, get_config
from agenticwit.core.logger import configure_logging
from agenticwit.core.logger import init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    The store handle is opened here (engine bound through Flask-SQLAlchemy),
    sessions are released on app-context teardown and
    :func:`agenticwit.core.extensions.dispose_store` closes the pool at
    shutdown.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Proxy headers if running behind a reverse proxy
    from agenticwit.core import proxy

    proxy.init_app(app)

    from agenticwit.core import extensions

    extensions.init_app(app)

    from agenticwit.infra.jwt import register_jwt_callbacks

    register_jwt_callbacks(extensions.jwt)

    init_logging(app)

    from agenticwit.core import cors

    cors.init_app(app)

    from agenticwit.api import init_app as init_api

    init_api(app)

    from agenticwit.core import errors

    errors.init_app(app)

    from agenticwit import cli as app_cli

    app_cli.init_app(app)

    return app

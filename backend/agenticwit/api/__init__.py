"""HTTP layer: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from flask import Flask


def init_app(app: Flask) -> None:
    """Mount every v1 blueprint at ``<API_BASE_PREFIX>/v1/<relative prefix>``."""
    from agenticwit.api.v1 import API_VERSION, BLUEPRINTS

    root = "{}/{}".format(app.config.get("API_BASE_PREFIX", "/api").rstrip("/"), API_VERSION)
    for blueprint, relative in BLUEPRINTS:
        app.register_blueprint(blueprint, url_prefix=root + relative)


__all__ = ["init_app"]

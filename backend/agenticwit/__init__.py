"""Expose the application factory at package level.

``from agenticwit import create_app`` builds the WSGI app; ``dispose_store``
closes its database pool and Redis client at shutdown.
"""

from __future__ import annotations

from .core.extensions import dispose_store
from .factory import create_app

__all__ = ["create_app", "dispose_store"]

"""Expose the application factory at package level.

``from catalog import create_app`` is the entry point used by gunicorn
(``catalog:create_app()``) and the Flask CLI (``FLASK_APP=catalog``).
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]

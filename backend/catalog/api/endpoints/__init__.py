"""API blueprint package bundling the catalog routes."""

from __future__ import annotations

from flask import Blueprint

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .auth import bp as auth_bp  # noqa: E402
from .authors import bp as authors_bp  # noqa: E402
from .books import bp as books_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .images import bp as images_bp  # noqa: E402
from .users import bp as users_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_api_base)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/health
    (auth_bp, "/auth"),  # -> /api/auth
    (users_bp, "/users"),
    (authors_bp, "/authors"),
    (books_bp, "/books"),
]

# Mounted at the application root: /images/<file>
ROOT_REGISTRY: list[tuple[Blueprint, str]] = [
    (images_bp, ""),
]

"""API blueprint package aggregating the catalog endpoints."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Register related blueprints beneath a common prefix.

    :param app: Application instance receiving the blueprints.
    :param base_prefix: Prefix applied to all entries, such as ``"/api"``.
        An empty prefix mounts at the application root.
    :param entries: ``(blueprint, relative_prefix)`` pairs where
        ``relative_prefix`` is appended to ``base_prefix``.
    """

    for bp, rel_prefix in entries:
        full_prefix = "/".join(
            segment for segment in [base_prefix.strip("/"), rel_prefix.strip("/")] if segment
        )
        app.register_blueprint(bp, url_prefix="/" + full_prefix if full_prefix else None)


def init_app(app: Flask) -> None:
    """Register blueprints, the auth gate and service error handlers."""

    api_base = app.config.get("API_BASE_PREFIX", "/api")

    from catalog.api.endpoints import REGISTRY, ROOT_REGISTRY

    register_blueprint_group(app, base_prefix=api_base, entries=REGISTRY)
    register_blueprint_group(app, base_prefix="", entries=ROOT_REGISTRY)

    from catalog.api import auth_gate, errors

    auth_gate.init_app(app)
    errors.init_app(app)


__all__ = ["init_app", "register_blueprint_group"]

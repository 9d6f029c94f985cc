"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from datetime import timedelta

from flask import Flask
from flask_jwt_extended import JWTManager
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
jwt = JWTManager()


def _derive_jwt_settings(app: Flask) -> None:
    """Translate the catalog token settings into flask-jwt-extended keys.

    :param app: Application whose config is completed in place.
    """
    cfg = app.config
    cfg["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(minutes=int(cfg["JWT_ACCESS_TOKEN_MINUTES"]))
    cfg["JWT_ENCODE_ISSUER"] = cfg["JWT_ISSUER"]
    cfg["JWT_DECODE_ISSUER"] = cfg["JWT_ISSUER"]
    cfg["JWT_ENCODE_AUDIENCE"] = cfg["JWT_AUDIENCE"]
    cfg["JWT_DECODE_AUDIENCE"] = cfg["JWT_AUDIENCE"]
    cfg["JWT_COOKIE_SECURE"] = bool(cfg.get("AUTH_COOKIE_SECURE", True))
    cfg["JWT_COOKIE_SAMESITE"] = cfg.get("AUTH_COOKIE_SAMESITE", "None")


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy and JWT extensions.

    :param app: Application used to bind extension instances. The
        :mod:`catalog.models` package is imported so the metadata knows every
        table before ``create_all`` runs.
    """
    db.init_app(app)

    from catalog import models as _models  # noqa: F401

    _derive_jwt_settings(app)
    jwt.init_app(app)

"""Fixtures for tests that need real threads against a file-backed database.

These tests run without the SAVEPOINT session used elsewhere: each thread
gets its own Flask-SQLAlchemy session and connection, as in production.
"""

from __future__ import annotations

import pytest

from catalog.core.config import TestingConfig
from catalog.core.extensions import db as _db
from catalog.factory import create_app


@pytest.fixture(autouse=True)
def _factories_session():
    """Factories are not wired here; data goes through the application."""
    yield


@pytest.fixture()
def threaded_app(tmp_path):
    """Application on a SQLite file so several threads can share it."""

    class ThreadedConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'catalog.db'}"
        SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"check_same_thread": False}}
        COVER_IMAGES_DIR = str(tmp_path / "covers")
        USE_PROXYFIX = False
        LOG_LEVEL = "WARNING"

    app = create_app(ThreadedConfig, instance_relative_config=False)
    with app.app_context():
        _db.create_all()
    yield app
    with app.app_context():
        _db.session.remove()
        _db.engine.dispose()

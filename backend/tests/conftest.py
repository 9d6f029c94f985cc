"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from catalog.core.config import TestingConfig
from catalog.core.extensions import db as _db  # Flask-SQLAlchemy instance
from catalog.factory import create_app  # application factory under test


@pytest.fixture(scope="session")
def images_dir(tmp_path_factory):
    return str(tmp_path_factory.mktemp("covers"))


@pytest.fixture(scope="session")
def app(images_dir):
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with an in-memory database and a temporary
        cover directory.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)

    class TestConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
        COVER_IMAGES_DIR = images_dir
        PUBLIC_BASE_URL = "http://testserver"
        USE_PROXYFIX = False
        LOG_LEVEL = "WARNING"

    app = create_app(TestConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


def _enable_sqlite_savepoints(engine) -> None:
    """Let SQLAlchemy, not pysqlite, emit BEGIN so SAVEPOINTs nest correctly."""

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_txn(dbapi_connection, connection_record):  # pragma: no cover
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):  # pragma: no cover
        conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application. The app context
        stays pushed for the whole session.
    """
    with app.app_context():
        if _db.engine.dialect.name == "sqlite":
            _enable_sqlite_savepoints(_db.engine)
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in an outer transaction.

    Notes
    -----
    The session joins the connection's transaction through SAVEPOINTs, so
    ``commit()`` from application code releases a savepoint while the outer
    transaction is rolled back after the test.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(
        bind=connection, autoflush=False, join_transaction_mode="create_savepoint"
    )
    scoped = scoped_session(SessionFactory)

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
    SQLAlchemySession.set(None)


# -- Identities ------------------------------------------------------------------
@pytest.fixture()
def member(session):
    """Persist a regular user and return its plain identity."""
    from tests.factories.user import UserFactory
    from tests.helpers.auth import Identity

    user = UserFactory(username="member", email="member@example.com")
    return Identity.of(user, password="Passw0rd!")


@pytest.fixture()
def admin(session):
    """Persist an administrator and return its plain identity."""
    from catalog.models.user import ROLE_ADMIN
    from tests.factories.user import UserFactory
    from tests.helpers.auth import Identity

    user = UserFactory(username="root", email="root@example.com", role=ROLE_ADMIN)
    return Identity.of(user, password="Passw0rd!")


@pytest.fixture()
def member_headers(member):
    from tests.helpers.auth import bearer, issue_token

    return bearer(issue_token(member))


@pytest.fixture()
def admin_headers(admin):
    from tests.helpers.auth import bearer, issue_token

    return bearer(issue_token(admin))

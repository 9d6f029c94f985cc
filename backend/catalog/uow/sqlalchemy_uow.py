"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from catalog.core.cancellation import CancellationToken, OperationCancelledError
from catalog.core.extensions import db
from catalog.repositories import AuthorRepository, BookRepository, UserRepository
from catalog.uow.base import UnitOfWork

log = logging.getLogger(__name__)


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.authors = AuthorRepository(session=self.session)
        self.books = BookRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write UoW using the Flask-scoped session.

    On a clean exit the transaction commits, unless the optional cancellation
    token was triggered: then everything is rolled back and
    :class:`OperationCancelledError` is raised.

    :param cancellation: Token checked immediately before commit.
    """

    def __init__(self, *, cancellation: CancellationToken | None = None) -> None:
        super().__init__(session=db.session)
        self.cancellation = cancellation

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session begins lazily on first use.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        if self.cancellation is not None and self.cancellation.cancelled:
            self.rollback()
            log.info("uow.cancelled: rolled back before commit")
            raise OperationCancelledError("Operation was cancelled; nothing was committed.")
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped session.

    - Applies ``SET TRANSACTION ... READ ONLY`` on PostgreSQL and MySQL when it
      owns the transaction.
    - Installs write guards (ORM flush and cursor level) for every dialect.
    - Always rolls back on exit and refuses ``commit()``.

    :param isolation_level: Optional isolation level hint such as
        ``"READ COMMITTED"``.
    """

    _WRITE_PREFIXES = (
        "insert",
        "update",
        "delete",
        "merge",
        "alter",
        "drop",
        "truncate",
        "create",
        "replace",
    )
    _TXN_DIALECTS = ("postgresql", "mysql", "mariadb")

    def __init__(self, *, isolation_level: str | None = "READ COMMITTED") -> None:
        # Guards attach to this request's Session; listeners on the
        # scoped_session proxy would reach every thread's sessions.
        super().__init__(session=db.session())
        self.isolation_level = isolation_level
        self._conn: Connection | None = None
        self._guarded_conn: Connection | None = None
        self._txn_ctx: SessionTransaction | None = None
        self._listeners_installed = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Own a fresh transaction when possible, otherwise attach to the current one.

        When a transaction is already running on the session (autobegin or a
        test fixture) SQLAlchemy raises ``InvalidRequestError``; the scope then
        attaches to it and relies on the guards alone.
        """
        self._txn_ctx = None
        try:
            txn_ctx = self.session.begin()
            txn_ctx.__enter__()
            self._txn_ctx = txn_ctx
        except InvalidRequestError:
            pass

        self._conn = self.session.connection()
        self._install_listeners()

        if self._txn_ctx is not None and self._conn.dialect.name in self._TXN_DIALECTS:
            try:
                if self.isolation_level:
                    iso = self.isolation_level.upper().strip()
                    self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {iso}"))
                self.session.execute(text("SET TRANSACTION READ ONLY"))
            except SQLAlchemyError as exc:
                log.warning("SET TRANSACTION directives failed (%s); using guards only.", exc)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._txn_ctx is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
                try:
                    self._txn_ctx.__exit__(exc_type, exc, tb)
                finally:
                    self._txn_ctx = None
        finally:
            self._remove_listeners()
            self._conn = None

    def commit(self) -> None:
        """
        :raises RuntimeError: Always; read-only scopes never commit.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guards --------------------------------

    def _install_listeners(self) -> None:
        if self._listeners_installed:
            return

        def _before_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

        def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            first_token = statement.lstrip().split(None, 1)[0].lower() if statement else ""
            if first_token.startswith(self._WRITE_PREFIXES):
                raise RuntimeError(
                    f"Read-only UnitOfWork: SQL statement blocked: {first_token.upper()}"
                )

        if self._conn is None:
            raise RuntimeError("Read-only UnitOfWork: no connection to guard.")

        event.listen(self.session, "before_flush", _before_flush)
        event.listen(self._conn, "before_cursor_execute", _before_cursor_execute)

        self._ro_before_flush = _before_flush
        self._ro_before_cursor_execute = _before_cursor_execute
        self._guarded_conn = self._conn
        self._listeners_installed = True

    def _remove_listeners(self) -> None:
        if not self._listeners_installed:
            return
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", self._ro_before_flush)
        with suppress(InvalidRequestError):
            event.remove(self._guarded_conn, "before_cursor_execute", self._ro_before_cursor_execute)
        self._guarded_conn = None
        self._listeners_installed = False

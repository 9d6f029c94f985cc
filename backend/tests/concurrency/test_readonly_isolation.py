from __future__ import annotations

import threading
from datetime import date

import pytest

from catalog.models.author import Author
from catalog.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork

REGISTER = "/api/auth/register"


class TestReadOnlyScopeIsolation:
    def test_open_read_scope_does_not_block_other_threads(self, threaded_app):
        """
        GIVEN one thread holding an open read-only unit of work
        WHEN  another thread registers a user meanwhile
        THEN  the registration succeeds and the reader's guards stay local
        """
        entered = threading.Event()
        release = threading.Event()
        errors: list[Exception] = []

        def reader():
            try:
                with threaded_app.app_context():
                    with SQLAlchemyReadOnlyUnitOfWork() as uow:
                        uow.users.get_by_username("nobody")
                        entered.set()
                        release.wait(timeout=10)
            except Exception as exc:
                errors.append(exc)
                entered.set()

        worker = threading.Thread(target=reader)
        worker.start()
        try:
            assert entered.wait(timeout=10)
            resp = threaded_app.test_client().post(
                REGISTER, json={"username": "alice", "email": "alice@example.com", "password": "p@ss"}
            )
        finally:
            release.set()
            worker.join(timeout=10)

        assert not errors
        assert resp.status_code == 200, resp.get_json()
        assert set(resp.get_json()) == {"token", "refreshToken"}

    def test_guard_still_blocks_the_owning_scope(self, threaded_app):
        author = Author(first_name="Ursula", last_name="Le Guin", date_of_birth=date(1929, 10, 21), country="US")
        with threaded_app.app_context():
            with pytest.raises(RuntimeError, match="flush blocked"):
                with SQLAlchemyReadOnlyUnitOfWork() as uow:
                    uow.authors.add(author)

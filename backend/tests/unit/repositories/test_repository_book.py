from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from catalog.repositories.base import Pagination
from catalog.repositories.book import BookRepository
from tests.factories.author import AuthorFactory
from tests.factories.book import BookFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def repo(session) -> BookRepository:
    return BookRepository(session=session)


class TestQueries:
    def test_get_by_isbn_normalizes_input(self, repo):
        book = BookFactory(isbn="9780441478125")
        assert repo.get_by_isbn("978-0-441-47812-5") is book

    def test_list_by_author_orders_by_title(self, repo):
        author = AuthorFactory()
        BookFactory(author=author, title="Zeta")
        BookFactory(author=author, title="Alpha")
        BookFactory()

        titles = [b.title for b in repo.list_by_author(author.id)]
        assert titles == ["Alpha", "Zeta"]

    def test_paginate_with_filters_and_meta(self, repo):
        BookFactory.create_batch(5, genre="Poetry")
        BookFactory.create_batch(2, genre="History")

        page = repo.paginate(Pagination(page=2, limit=2, sort=["title"]), filters={"genre": "Poetry"})

        assert page.total == 5
        assert len(page.items) == 2
        assert all(b.genre == "Poetry" for b in page.items)

    def test_unknown_sort_tokens_are_ignored(self, repo):
        BookFactory.create_batch(2)
        page = repo.paginate(Pagination(page=1, limit=10, sort=["-password", "title"]))
        assert page.total == 2

    def test_assign_updates_rejects_borrow_fields(self, repo):
        book = BookFactory()
        with pytest.raises(ValueError):
            repo.assign_updates(book, {"is_borrowed": True})


class TestBorrowTransitions:
    def test_borrow_then_second_borrow_fails(self, repo, session):
        """
        GIVEN an available book
        WHEN  two borrowers flip it in sequence
        THEN  only the first transition applies
        """
        book = BookFactory()
        first, second = UserFactory(), UserFactory()
        book_id, first_id = book.id, first.id
        now = datetime.now(timezone.utc)
        due = now + timedelta(days=14)

        assert repo.mark_borrowed(book_id, borrower_id=first_id, borrowed_at=now, due_date=due)
        assert not repo.mark_borrowed(book_id, borrower_id=second.id, borrowed_at=now, due_date=due)
        session.commit()

        reloaded = repo.get(book_id)
        assert reloaded.is_borrowed is True
        assert reloaded.borrowed_by_id == first_id
        assert reloaded.due_date_utc == due

    def test_return_clears_borrow_state(self, repo):
        book = BookFactory()
        user = UserFactory()
        now = datetime.now(timezone.utc)
        repo.mark_borrowed(book.id, borrower_id=user.id, borrowed_at=now, due_date=now + timedelta(days=1))

        assert repo.mark_returned(book.id)
        assert not repo.mark_returned(book.id)

        reloaded = repo.get(book.id)
        assert reloaded.is_borrowed is False
        assert reloaded.borrowed_at is None
        assert reloaded.due_date is None
        assert reloaded.borrowed_by_id is None

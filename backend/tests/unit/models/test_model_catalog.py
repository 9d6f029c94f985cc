from __future__ import annotations

from datetime import date, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from catalog.models.author import Author
from catalog.models.book import Book
from tests.factories.author import AuthorFactory
from tests.factories.book import BookFactory


class TestAuthorModel:
    def test_full_name(self):
        author = Author(first_name=" Ursula ", last_name="Le Guin", date_of_birth=date(1929, 10, 21), country="US")
        assert author.full_name == "Ursula Le Guin"

    def test_birth_date_must_be_past(self):
        with pytest.raises(ValueError):
            Author(first_name="A", last_name="B", date_of_birth=date.today(), country="X")

    def test_blank_country_rejected(self):
        with pytest.raises(ValueError):
            Author(
                first_name="A",
                last_name="B",
                date_of_birth=date.today() - timedelta(days=1),
                country=" ",
            )

    def test_books_relationship(self, session):
        author = AuthorFactory()
        BookFactory(author=author, title="B")
        BookFactory(author=author, title="A")
        session.refresh(author)
        assert sorted(b.title for b in author.books) == ["A", "B"]


class TestBookModel:
    def test_isbn_normalized(self):
        book = Book(isbn="978-0-441-47812-5", title="t", genre="g", description="d")
        assert book.isbn == "9780441478125"

    @pytest.mark.parametrize("isbn", ["123", "12345678901234", ""])
    def test_isbn_length_enforced(self, isbn):
        with pytest.raises(ValueError):
            Book(isbn=isbn, title="t", genre="g", description="d")

    def test_isbn_unique(self, session):
        BookFactory(isbn="9780000000001")
        with pytest.raises(IntegrityError):
            BookFactory(isbn="9780000000001")
        session.rollback()

    def test_new_book_is_available(self, session):
        book = BookFactory()
        assert book.is_borrowed is False
        assert book.borrowed_at is None
        assert book.due_date is None
        assert book.borrowed_by_id is None
        assert book.image_path is None

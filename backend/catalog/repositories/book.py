"""Book repository, including conditional borrow/return updates."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import cast

from sqlalchemy import select, update

from catalog.models.book import Book
from catalog.repositories.base import BaseRepository


class BookRepository(BaseRepository[Book]):
    """Persistence-only repository for :class:`Book`.

    Borrow state transitions are single conditional ``UPDATE`` statements so
    two concurrent borrowers of the same copy cannot both succeed.
    """

    model = Book

    def _sortable_fields(self):
        return {
            "title": Book.title,
            "genre": Book.genre,
            "isbn": Book.isbn,
            "due_date": Book.due_date,
            "created_at": Book.created_at,
        }

    def _filterable_fields(self):
        return {
            "genre": Book.genre,
            "author_id": Book.author_id,
            "is_borrowed": Book.is_borrowed,
        }

    def _updatable_fields(self):
        return {"isbn", "title", "genre", "description", "author_id"}

    def get_by_isbn(self, isbn: str) -> Book | None:
        """Fetch a book by ISBN, ignoring hyphens, spaces and case."""
        normalized = isbn.replace("-", "").replace(" ", "").upper()
        stmt = select(Book).where(Book.isbn == normalized)
        return cast(Book | None, self.session.execute(stmt).scalars().first())

    def list_by_author(self, author_id: uuid.UUID) -> list[Book]:
        stmt = select(Book).where(Book.author_id == author_id).order_by(Book.title, Book.id)
        return list(self.session.execute(stmt).scalars().all())

    def mark_borrowed(
        self,
        book_id: uuid.UUID,
        *,
        borrower_id: uuid.UUID,
        borrowed_at: datetime,
        due_date: datetime,
    ) -> bool:
        """
        Flip ``is_borrowed`` to ``True`` if the book is currently available.

        :returns: ``True`` when the row transitioned.
        """
        stmt = (
            update(Book)
            .where(Book.id == book_id, Book.is_borrowed.is_(False))
            .values(
                is_borrowed=True,
                borrowed_at=borrowed_at,
                due_date=due_date,
                borrowed_by_id=borrower_id,
            )
            .execution_options(synchronize_session=False)
        )
        return self._execute_guarded_update(stmt, book_id)

    def mark_returned(self, book_id: uuid.UUID) -> bool:
        """Clear the borrow state if the book is currently borrowed."""
        stmt = (
            update(Book)
            .where(Book.id == book_id, Book.is_borrowed.is_(True))
            .values(is_borrowed=False, borrowed_at=None, due_date=None, borrowed_by_id=None)
            .execution_options(synchronize_session=False)
        )
        return self._execute_guarded_update(stmt, book_id)

    def set_image_path(self, book: Book, image_path: str) -> Book:
        book.image_path = image_path
        self.session.flush()
        return book

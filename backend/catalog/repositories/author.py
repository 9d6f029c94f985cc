"""Author repository."""

from __future__ import annotations

import uuid

from sqlalchemy import func, select

from catalog.models.author import Author
from catalog.models.book import Book
from catalog.repositories.base import BaseRepository


class AuthorRepository(BaseRepository[Author]):
    model = Author

    def _sortable_fields(self):
        return {
            "first_name": Author.first_name,
            "last_name": Author.last_name,
            "date_of_birth": Author.date_of_birth,
            "country": Author.country,
            "created_at": Author.created_at,
        }

    def _filterable_fields(self):
        return {"country": Author.country}

    def _updatable_fields(self):
        return {"first_name", "last_name", "date_of_birth", "country"}

    def count_books(self, author_id: uuid.UUID) -> int:
        """Return how many books reference the author."""
        stmt = select(func.count()).select_from(Book).where(Book.author_id == author_id)
        return int(self.session.execute(stmt).scalar_one())

"""
AuthorService
=============

CRUD for the ``Author`` aggregate.

Notes
-----
- Read operations use ``ro_uow()``; write operations use ``rw_uow()``.
- An author that still has books cannot be deleted.
"""

from __future__ import annotations

import uuid

from catalog.models.author import Author
from catalog.repositories.author import AuthorRepository
from catalog.services._shared.base import BaseService
from catalog.services._shared.dto import PageMeta
from catalog.services._shared.errors import ConflictError, NotFoundError, ServiceError
from catalog.services.authors.dto import (
    AuthorCreateIn,
    AuthorListIn,
    AuthorListOut,
    AuthorOut,
    AuthorUpdateIn,
)
from catalog.services.books.dto import BookOut
from catalog.services.books.service import to_book_out


def to_author_out(author: Author) -> AuthorOut:
    return AuthorOut(
        id=author.id,
        first_name=author.first_name,
        last_name=author.last_name,
        date_of_birth=author.date_of_birth,
        country=author.country,
        created_at=author.created_at,
        updated_at=author.updated_at,
    )


class AuthorService(BaseService):
    """Application service for authors."""

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_authors(self, dto: AuthorListIn) -> AuthorListOut:
        pg = self.ensure_pagination(
            page=dto.pagination.page, limit=dto.pagination.limit, sort=dto.pagination.sort
        )
        with self.ro_uow() as uow:
            page = uow.authors.paginate(pg, filters={"country": dto.country})
            items = [to_author_out(a) for a in page.items]
        return AuthorListOut(
            items=items, meta=PageMeta.build(page=pg.page, limit=pg.limit, total=page.total)
        )

    def get_author(self, author_id: uuid.UUID) -> AuthorOut:
        """
        :raises NotFoundError: If the author does not exist.
        """
        with self.ro_uow() as uow:
            author = uow.authors.get(author_id)
            if author is None:
                raise NotFoundError("Author", author_id)
            return to_author_out(author)

    def books_of(self, author_id: uuid.UUID) -> list[BookOut]:
        """
        Return the books written by ``author_id`` ordered by title.

        :raises NotFoundError: If the author does not exist.
        """
        with self.ro_uow() as uow:
            if uow.authors.get(author_id) is None:
                raise NotFoundError("Author", author_id)
            return [to_book_out(b) for b in uow.books.list_by_author(author_id)]

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create_author(self, dto: AuthorCreateIn) -> AuthorOut:
        """
        :raises ServiceError: When a field fails model validation.
        """
        self.checkpoint()
        with self.rw_uow() as uow:
            repo: AuthorRepository = uow.authors
            try:
                author = repo.add(
                    Author(
                        first_name=dto.first_name,
                        last_name=dto.last_name,
                        date_of_birth=dto.date_of_birth,
                        country=dto.country,
                    )
                )
            except ValueError as exc:
                raise ServiceError(str(exc)) from exc
            return to_author_out(author)

    def update_author(self, dto: AuthorUpdateIn) -> AuthorOut:
        """
        Apply a partial update.

        :raises NotFoundError: If the author does not exist.
        :raises ServiceError: On non-updatable keys or invalid values.
        """
        self.checkpoint()
        with self.rw_uow() as uow:
            repo: AuthorRepository = uow.authors
            author = repo.get(dto.author_id)
            if author is None:
                raise NotFoundError("Author", dto.author_id)
            try:
                repo.assign_updates(author, dto.fields)
            except ValueError as exc:
                raise ServiceError(str(exc)) from exc
            return to_author_out(author)

    def delete_author(self, author_id: uuid.UUID) -> None:
        """
        :raises NotFoundError: If the author does not exist.
        :raises ConflictError: While books still reference the author.
        """
        with self.rw_uow() as uow:
            repo: AuthorRepository = uow.authors
            author = repo.get(author_id)
            if author is None:
                raise NotFoundError("Author", author_id)
            if repo.count_books(author_id) > 0:
                raise ConflictError("Author", "author still has books")
            repo.delete(author)

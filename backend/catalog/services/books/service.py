"""
BookService
===========

Application service for books:

- CRUD with ISBN uniqueness and author existence checks.
- Borrow/return workflow. Transitions are conditional updates, so two
  callers racing for the same copy cannot both succeed.
- Cover uploads through the :class:`ImageStore` port.

Notes
-----
- Framework-agnostic; errors are domain exceptions from ``_shared.errors``.
- Read operations use ``ro_uow()``; write operations use ``rw_uow()``.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import IntegrityError

from catalog.models.base import as_utc
from catalog.models.book import Book
from catalog.repositories.book import BookRepository
from catalog.services._shared.base import BaseService, ServiceContext
from catalog.services._shared.dto import PageMeta
from catalog.services._shared.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ServiceError,
    violates,
)
from catalog.services._shared.ports import ImageStore
from catalog.services.books.dto import (
    BookCreateIn,
    BookListIn,
    BookListOut,
    BookOut,
    BookUpdateIn,
    BorrowIn,
    CoverUploadIn,
)

log = logging.getLogger(__name__)


def to_book_out(book: Book) -> BookOut:
    author = book.author
    return BookOut(
        id=book.id,
        isbn=book.isbn,
        title=book.title,
        genre=book.genre,
        description=book.description,
        author_id=book.author_id,
        author_name=author.full_name if author is not None else None,
        is_borrowed=bool(book.is_borrowed),
        borrowed_at=book.borrowed_at_utc,
        due_date=book.due_date_utc,
        borrowed_by_id=book.borrowed_by_id,
        image_path=book.image_path,
        created_at=book.created_at,
        updated_at=book.updated_at,
    )


class BookService(BaseService):
    """Application service for the ``Book`` aggregate."""

    def __init__(
        self, *, ctx: ServiceContext | None = None, image_store: ImageStore | None = None
    ) -> None:
        """
        :param ctx: Request-scoped context.
        :param image_store: Cover storage; required only by :meth:`attach_cover`.
        """
        super().__init__(ctx=ctx)
        self.images = image_store

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_books(self, dto: BookListIn) -> BookListOut:
        pg = self.ensure_pagination(
            page=dto.pagination.page, limit=dto.pagination.limit, sort=dto.pagination.sort
        )
        filters = {"genre": dto.genre, "author_id": dto.author_id, "is_borrowed": dto.is_borrowed}
        with self.ro_uow() as uow:
            page = uow.books.paginate(pg, filters=filters)
            items = [to_book_out(b) for b in page.items]
        return BookListOut(
            items=items, meta=PageMeta.build(page=pg.page, limit=pg.limit, total=page.total)
        )

    def get_book(self, book_id: uuid.UUID) -> BookOut:
        """
        :raises NotFoundError: If the book does not exist.
        """
        with self.ro_uow() as uow:
            book = uow.books.get(book_id)
            if book is None:
                raise NotFoundError("Book", book_id)
            return to_book_out(book)

    def get_by_isbn(self, isbn: str) -> BookOut:
        with self.ro_uow() as uow:
            book = uow.books.get_by_isbn(isbn)
            if book is None:
                raise NotFoundError("Book", isbn)
            return to_book_out(book)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create_book(self, dto: BookCreateIn) -> BookOut:
        """
        Create a book.

        :raises ServiceError: If the author does not exist or a value is invalid.
        :raises ConflictError: If the ISBN is already catalogued.
        """
        self.checkpoint()
        try:
            with self.rw_uow() as uow:
                repo: BookRepository = uow.books
                if uow.authors.get(dto.author_id) is None:
                    raise ServiceError(f"Author not found: {dto.author_id}")
                try:
                    book = Book(
                        isbn=dto.isbn,
                        title=dto.title,
                        genre=dto.genre,
                        description=dto.description,
                        author_id=dto.author_id,
                    )
                except ValueError as exc:
                    raise ServiceError(str(exc)) from exc
                if repo.get_by_isbn(book.isbn) is not None:
                    raise ConflictError("Book", "ISBN already exists")
                repo.add(book)
                out = self._reload(repo, book.id)
        except IntegrityError as exc:
            if violates(exc, "isbn"):
                raise ConflictError("Book", "ISBN already exists") from exc
            raise
        log.info("books.created book_id=%s", out.id)
        return out

    def update_book(self, dto: BookUpdateIn) -> BookOut:
        """
        Apply a partial update of descriptive fields.

        :raises NotFoundError: If the book does not exist.
        :raises ConflictError: If the new ISBN belongs to another book.
        :raises ServiceError: On an unknown author or invalid values.
        """
        self.checkpoint()
        try:
            with self.rw_uow() as uow:
                repo: BookRepository = uow.books
                book = repo.get(dto.book_id)
                if book is None:
                    raise NotFoundError("Book", dto.book_id)

                new_author = dto.fields.get("author_id")
                if new_author is not None and uow.authors.get(new_author) is None:
                    raise ServiceError(f"Author not found: {new_author}")

                new_isbn = dto.fields.get("isbn")
                if new_isbn is not None:
                    other = repo.get_by_isbn(new_isbn)
                    if other is not None and other.id != book.id:
                        raise ConflictError("Book", "ISBN already exists")

                try:
                    repo.assign_updates(book, dto.fields)
                except ValueError as exc:
                    raise ServiceError(str(exc)) from exc
                out = self._reload(repo, book.id)
        except IntegrityError as exc:
            if violates(exc, "isbn"):
                raise ConflictError("Book", "ISBN already exists") from exc
            raise
        return out

    def delete_book(self, book_id: uuid.UUID) -> None:
        with self.rw_uow() as uow:
            book = uow.books.get(book_id)
            if book is None:
                raise NotFoundError("Book", book_id)
            image_path = book.image_path
            uow.books.delete(book)
        if image_path and self.images is not None:
            self.images.delete(image_path)

    # ------------------------------------------------------------------ #
    # Borrow workflow
    # ------------------------------------------------------------------ #

    def borrow(self, dto: BorrowIn) -> BookOut:
        """
        Borrow a book on behalf of the current actor.

        :raises AuthorizationError: Without an authenticated actor.
        :raises NotFoundError: If the book does not exist.
        :raises ServiceError: If ``due_date`` is not after now.
        :raises ConflictError: If the book is already borrowed.
        """
        if self.ctx.actor_id is None:
            raise AuthorizationError("Borrowing requires an authenticated user.")
        now = self.now_utc()
        due = as_utc(dto.due_date)
        if due is None or due <= now:
            raise ServiceError("Due date must be in the future.")

        with self.rw_uow() as uow:
            repo: BookRepository = uow.books
            if repo.get(dto.book_id) is None:
                raise NotFoundError("Book", dto.book_id)
            if not repo.mark_borrowed(
                dto.book_id, borrower_id=self.ctx.actor_id, borrowed_at=now, due_date=due
            ):
                raise ConflictError("Book", "book is already borrowed")
            self.checkpoint()
            out = self._reload(repo, dto.book_id)
        log.info("books.borrowed book_id=%s user_id=%s", dto.book_id, self.ctx.actor_id)
        return out

    def return_book(self, book_id: uuid.UUID) -> BookOut:
        """
        Return a borrowed book.

        :raises NotFoundError: If the book does not exist.
        :raises ConflictError: If the book is not borrowed.
        :raises AuthorizationError: Unless the actor is the borrower or an admin.
        """
        with self.rw_uow() as uow:
            repo: BookRepository = uow.books
            book = repo.get(book_id)
            if book is None:
                raise NotFoundError("Book", book_id)
            if not book.is_borrowed:
                raise ConflictError("Book", "book is not borrowed")
            self.ensure_owner_or_admin(
                book.borrowed_by_id, msg="Only the borrower or an administrator can return it."
            )
            if not repo.mark_returned(book_id):
                raise ConflictError("Book", "book is not borrowed")
            self.checkpoint()
            out = self._reload(repo, book_id)
        log.info("books.returned book_id=%s", book_id)
        return out

    # ------------------------------------------------------------------ #
    # Covers
    # ------------------------------------------------------------------ #

    def attach_cover(self, dto: CoverUploadIn) -> BookOut:
        """
        Store a cover image and record its public path on the book.

        :raises NotFoundError: If the book does not exist.
        :raises ServiceError: On a missing file name or unsupported extension.
        """
        if self.images is None:
            raise RuntimeError("BookService.attach_cover requires an ImageStore.")
        with self.ro_uow() as uow:
            if uow.books.get(dto.book_id) is None:
                raise NotFoundError("Book", dto.book_id)

        try:
            path = self.images.save(key=str(dto.book_id), filename=dto.filename, stream=dto.stream)
        except ValueError as exc:
            raise ServiceError(str(exc)) from exc

        try:
            with self.rw_uow() as uow:
                book = uow.books.get(dto.book_id)
                if book is None:
                    raise NotFoundError("Book", dto.book_id)
                uow.books.set_image_path(book, path)
                out = to_book_out(book)
        except Exception:
            self.images.delete(path)
            raise
        return out

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _reload(repo: BookRepository, book_id: uuid.UUID) -> BookOut:
        book = repo.get(book_id)
        if book is None:
            raise NotFoundError("Book", book_id)
        repo.session.refresh(book)
        return to_book_out(book)

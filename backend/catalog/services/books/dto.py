"""
DTOs for BookService.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, BinaryIO

from catalog.services._shared.dto import PageMeta, PaginationIn


@dataclass(frozen=True, slots=True)
class BookCreateIn:
    """
    Input DTO for creating a book.

    :param isbn: ISBN-10 or ISBN-13; hyphens and spaces are ignored.
    :type isbn: str
    :param title: Title.
    :type title: str
    :param genre: Genre label.
    :type genre: str
    :param description: Free text.
    :type description: str
    :param author_id: Existing author.
    :type author_id: uuid.UUID
    """

    isbn: str
    title: str
    genre: str
    description: str
    author_id: uuid.UUID


@dataclass(frozen=True, slots=True)
class BookUpdateIn:
    book_id: uuid.UUID
    fields: dict[str, Any]


@dataclass(frozen=True, slots=True)
class BookListIn:
    """
    Input DTO for listing books.

    :param pagination: Page, limit and sort tokens.
    :param genre: Optional exact genre filter.
    :param author_id: Optional author filter.
    :param is_borrowed: Optional availability filter.
    """

    pagination: PaginationIn
    genre: str | None = None
    author_id: uuid.UUID | None = None
    is_borrowed: bool | None = None


@dataclass(frozen=True, slots=True)
class BorrowIn:
    book_id: uuid.UUID
    due_date: datetime


@dataclass(frozen=True, slots=True)
class CoverUploadIn:
    """
    Input DTO for a cover upload.

    :param book_id: Target book.
    :param filename: Client-supplied file name.
    :param stream: File content.
    """

    book_id: uuid.UUID
    filename: str
    stream: BinaryIO


@dataclass(frozen=True, slots=True)
class BookOut:
    id: uuid.UUID
    isbn: str
    title: str
    genre: str
    description: str
    author_id: uuid.UUID
    author_name: str | None
    is_borrowed: bool
    borrowed_at: datetime | None
    due_date: datetime | None
    borrowed_by_id: uuid.UUID | None
    image_path: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class BookListOut:
    items: list[BookOut]
    meta: PageMeta

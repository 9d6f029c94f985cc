"""Repository package exposing persistence-layer access for the catalog models."""

from __future__ import annotations

from catalog.repositories.author import AuthorRepository
from catalog.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    apply_sorting,
    paginate_select,
)
from catalog.repositories.book import BookRepository
from catalog.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "Page",
    "Pagination",
    "apply_sorting",
    "paginate_select",
    "AuthorRepository",
    "BookRepository",
    "UserRepository",
]

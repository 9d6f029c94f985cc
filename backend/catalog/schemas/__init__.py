"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginSchema, RegisterSchema, TokenPairSchema
from .author import AuthorCreateSchema, AuthorFilterSchema, AuthorSchema, AuthorUpdateSchema
from .book import (
    BookCreateSchema,
    BookFilterSchema,
    BookSchema,
    BookUpdateSchema,
    BorrowSchema,
)
from .common import MetaSchema, PaginationQuerySchema, SortQuerySchema, build_meta
from .user import UserFilterSchema, UserSchema

__all__ = [
    "LoginSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "AuthorCreateSchema",
    "AuthorFilterSchema",
    "AuthorSchema",
    "AuthorUpdateSchema",
    "BookCreateSchema",
    "BookFilterSchema",
    "BookSchema",
    "BookUpdateSchema",
    "BorrowSchema",
    "MetaSchema",
    "PaginationQuerySchema",
    "SortQuerySchema",
    "build_meta",
    "UserFilterSchema",
    "UserSchema",
]

"""Book model including its borrow state."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from catalog.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin, as_utc

if TYPE_CHECKING:
    from .author import Author


class Book(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Catalog entry for a physical book.

    Fields
    ------
    isbn : str
        10 to 13 characters, unique.
    title : str
        At most 200 characters.
    genre : str
        At most 100 characters.
    description : str
        Free text, required.
    author_id : uuid.UUID
        Owning author.
    is_borrowed : bool
        Borrow flag; ``borrowed_at``, ``due_date`` and ``borrowed_by_id`` are
        set only while it is ``True``.
    image_path : str | None
        Public path of the cover (``/images/<file>``).
    """

    __tablename__ = "books"

    isbn: Mapped[str] = mapped_column(String(13), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    genre: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("authors.id", ondelete="RESTRICT"), nullable=False
    )

    is_borrowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    borrowed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    borrowed_by_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    image_path: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    author: Mapped[Author] = relationship(back_populates="books", lazy="joined")

    __table_args__ = (
        UniqueConstraint("isbn", name="uq_books_isbn"),
        Index("ix_books_author_id", "author_id"),
        Index("ix_books_genre", "genre"),
    )

    @property
    def due_date_utc(self) -> datetime | None:
        return as_utc(self.due_date)

    @property
    def borrowed_at_utc(self) -> datetime | None:
        return as_utc(self.borrowed_at)

    @validates("isbn")
    def _normalize_isbn(self, key: str, value: str) -> str:
        """
        Strip hyphens and spaces, then check the length.

        :raises ValueError: If the normalized ISBN is not 10 to 13 characters.
        """
        if not isinstance(value, str):
            raise ValueError("ISBN is required.")
        v = value.replace("-", "").replace(" ", "").upper()
        if not 10 <= len(v) <= 13:
            raise ValueError("ISBN must be 10 to 13 characters long.")
        return v

    @validates("title", "genre", "description")
    def _strip(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} is required.")
        return value.strip()

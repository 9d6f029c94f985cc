"""Author model."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from catalog.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .book import Book


class Author(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Person credited with one or more books.

    Fields
    ------
    first_name, last_name : str
        Trimmed, at most 100 characters each.
    date_of_birth : date
        Must lie in the past.
    country : str
        Country of origin.
    """

    __tablename__ = "authors"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)

    books: Mapped[list[Book]] = relationship(back_populates="author")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @validates("first_name", "last_name", "country")
    def _strip(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} is required.")
        return value.strip()

    @validates("date_of_birth")
    def _check_birth(self, key: str, value: date) -> date:
        if value >= date.today():
            raise ValueError("date_of_birth must be in the past.")
        return value

"""
DTOs for AuthorService.

Framework-agnostic contracts between the API layer and the service managing
the ``Author`` aggregate.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from catalog.services._shared.dto import PageMeta, PaginationIn

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthorCreateIn:
    """
    Input DTO for creating an author.

    :param first_name: Given name.
    :type first_name: str
    :param last_name: Family name.
    :type last_name: str
    :param date_of_birth: Birth date, strictly in the past.
    :type date_of_birth: date
    :param country: Country of origin.
    :type country: str
    """

    first_name: str
    last_name: str
    date_of_birth: date
    country: str


@dataclass(frozen=True, slots=True)
class AuthorUpdateIn:
    """
    Input DTO for updating an author.

    :param author_id: Target author.
    :param fields: Changed attributes only.
    """

    author_id: uuid.UUID
    fields: dict[str, Any]


@dataclass(frozen=True, slots=True)
class AuthorListIn:
    pagination: PaginationIn
    country: str | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthorOut:
    id: uuid.UUID
    first_name: str
    last_name: str
    date_of_birth: date
    country: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class AuthorListOut:
    items: list[AuthorOut]
    meta: PageMeta

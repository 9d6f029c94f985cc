"""Shared DTOs composed by the per-service DTO modules."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class PaginationIn:
    """
    Input pagination contract.

    :param page: 1-based page number.
    :param limit: Page size (> 0).
    :param sort: Sort tokens like ``["-created_at", "title"]``.
    """

    page: int = 1
    limit: int = 20
    sort: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PageMeta:
    """Output pagination metadata."""

    page: int
    limit: int
    total: int
    has_prev: bool
    has_next: bool

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> PageMeta:
        return cls(
            page=page,
            limit=limit,
            total=total,
            has_prev=page > 1,
            has_next=page * limit < total,
        )

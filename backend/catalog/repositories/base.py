"""Generic repository base and query utilities for SQLAlchemy 2.x.

Repositories are persistence-only:

- safe sorting through a per-repository whitelist, with the primary key as a
  final tiebreaker so pages are deterministic;
- equality filters through a whitelist;
- updates restricted to an explicit set of assignable fields;
- no commit/rollback; the Unit of Work owns the transaction.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from catalog.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


@dataclass(slots=True)
class Pagination:
    """Pagination input parameters.

    :param page: 1-based page number.
    :param limit: Page size.
    :param sort: Public sort tokens (e.g., ``["-created_at", "title"]``).
    """

    page: int
    limit: int
    sort: list[str]


@dataclass(slots=True)
class Page(Generic[E]):
    """Result page with metadata."""

    items: Sequence[E]
    total: int
    page: int
    limit: int


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse public sort tokens into ``(field, is_desc)`` tuples."""
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        field = (token[1:] if is_desc else token).strip()
        if field:
            parsed.append((field, is_desc))
    return parsed


def apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply ``ORDER BY`` clauses from a whitelist mapping.

    Unknown tokens are ignored. The primary key is always appended as a final
    ascending tiebreaker.

    :param stmt: Base selectable.
    :param sortable_fields: Public field to ORM attribute mapping.
    :param tokens: Public sort tokens.
    :param pk_attr: Primary-key attribute used as a tiebreaker.
    :returns: Ordered select.
    """
    orders: list[Any] = []
    for field, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(field)
        if col is not None:
            orders.append(col.desc() if is_desc else col.asc())
    if orders:
        stmt = stmt.order_by(*orders)
    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.asc())
    return stmt


def paginate_select(
    session: Session,
    stmt: Select[Any],
    *,
    page: int,
    limit: int,
) -> tuple[list[Any], int]:
    """Execute a select with ``LIMIT``/``OFFSET`` and a total count.

    :param session: Active SQLAlchemy session.
    :param stmt: Filtered and sorted select.
    :param page: 1-based page number (clamped to ``>= 1``).
    :param limit: Page size (clamped to ``>= 1``).
    :returns: ``(items, total)``.
    """
    page = max(int(page), 1)
    limit = max(int(limit), 1)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = int(session.execute(count_stmt).scalar_one())

    sliced = stmt.limit(limit).offset((page - 1) * limit)
    items = list(session.execute(sliced).scalars().all())
    return items, total


class BaseRepository(Generic[E]):
    """Generic persistence-only repository for a single aggregate.

    Subclasses set ``model`` and may override ``_sortable_fields``,
    ``_filterable_fields`` and ``_updatable_fields``.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """
        :param session: Session shared across the Unit of Work scope; the
            Flask-scoped session is used when omitted.
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Whitelists -------------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _updatable_fields(self) -> set[str]:
        return set()

    def _apply_equality_filters(
        self,
        stmt: Select[Any],
        filters: Mapping[str, Any] | None,
    ) -> Select[Any]:
        """Apply whitelisted equality filters; ``None`` values are skipped."""
        if not filters:
            return stmt
        allowed = self._filterable_fields()
        clauses = [
            allowed[k] == v for k, v in filters.items() if k in allowed and v is not None
        ]
        return stmt.where(and_(*clauses)) if clauses else stmt

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush so constraint violations surface early."""
        self.session.add(instance)
        self.session.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key."""
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        result = self.session.execute(select(self.model).where(pk_attr == entity_id))
        return cast(E | None, result.scalars().first())

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.session.flush()

    def _execute_guarded_update(self, stmt: Any, entity_id: Any) -> bool:
        """Run a single-row conditional ``UPDATE`` and report whether it matched.

        The statement bypasses ORM synchronization; the cached instance, if
        any, is expired so the next attribute access reloads the row.
        """
        matched = self.session.execute(stmt).rowcount == 1
        instance = self.session.identity_map.get(self.session.identity_key(self.model, entity_id))
        if instance is not None:
            self.session.expire(instance)
        return matched

    def assign_updates(self, instance: E, fields: Mapping[str, Any]) -> E:
        """Assign only whitelisted keys to ``instance`` and flush.

        ``setattr`` is used so ``@validates`` hooks on the model run.

        :raises ValueError: On keys outside ``_updatable_fields``.
        """
        allowed = self._updatable_fields()
        unknown = [k for k in fields if k not in allowed]
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        for k, v in fields.items():
            setattr(instance, k, v)
        self.session.flush()
        return instance

    # ------------------------------- Listing ---------------------------------

    def list(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        sort: Iterable[str] | None = None,
    ) -> list[E]:
        """List entities with whitelisted filters and sorting."""
        stmt: Select[Any] = self._apply_equality_filters(select(self.model), filters)
        stmt = apply_sorting(stmt, self._sortable_fields(), sort or [], pk_attr=self._pk_attr())
        return cast(list[E], list(self.session.execute(stmt).scalars().all()))

    def paginate(
        self,
        pagination: Pagination,
        *,
        filters: Mapping[str, Any] | None = None,
    ) -> Page[E]:
        """Paginate entities with stable sorting and a total count."""
        stmt: Select[Any] = self._apply_equality_filters(select(self.model), filters)
        stmt = apply_sorting(
            stmt, self._sortable_fields(), pagination.sort, pk_attr=self._pk_attr()
        )
        items, total = paginate_select(
            self.session, stmt, page=pagination.page, limit=pagination.limit
        )
        return Page(
            items=cast(list[E], items),
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )

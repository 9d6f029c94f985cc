"""
Domain-level exceptions used within the catalog services.

These exceptions are framework-agnostic; translation to HTTP responses
happens in :func:`catalog.services._shared.base.translate_service_error`.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError mentions a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the column
    (``users.email``), so callers pass whichever identifies the violation.

    :param exc: The exception raised during flush/commit.
    :param constraint_name: Constraint or column name to look for.
    :returns: ``True`` if the error message contains it.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


class ServiceError(Exception):
    """Base class for all service-level errors (maps to 400 unless refined)."""


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is absent.

    :param entity: Entity name (e.g., ``"Book"``).
    :param key: Identifier or search key.
    """

    entity: str
    key: object

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised on uniqueness or state conflicts.

    :param entity: Entity name.
    :param detail: Short human-readable explanation.
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class AuthorizationError(ServiceError):
    """Raised when the actor may not perform the operation on this resource."""

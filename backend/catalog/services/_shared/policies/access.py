"""Role-based authorization policy table.

Endpoints declare the permission they need; the auth gate looks the caller's
role up here before the view runs.
"""

from __future__ import annotations

from collections.abc import Mapping

from catalog.models.user import ROLE_ADMIN, ROLE_USER

CATALOG_READ = "catalog:read"
CATALOG_WRITE = "catalog:write"
CATALOG_UPDATE = "catalog:update"
CATALOG_DELETE = "catalog:delete"
BOOKS_BORROW = "books:borrow"
USERS_MANAGE = "users:manage"

ROLE_PERMISSIONS: Mapping[str, frozenset[str]] = {
    ROLE_USER: frozenset({CATALOG_READ, BOOKS_BORROW}),
    ROLE_ADMIN: frozenset(
        {
            CATALOG_READ,
            BOOKS_BORROW,
            CATALOG_WRITE,
            CATALOG_UPDATE,
            CATALOG_DELETE,
            USERS_MANAGE,
        }
    ),
}


def permissions_for(role: str | None) -> frozenset[str]:
    """Return the permissions granted to ``role`` (empty for unknown roles)."""
    if role is None:
        return frozenset()
    return ROLE_PERMISSIONS.get(role, frozenset())


def is_allowed(role: str | None, permission: str) -> bool:
    return permission in permissions_for(role)


def is_owner_or_admin(*, actor_id, owner_id, role: str | None) -> bool:
    """Return ``True`` if the actor owns the resource or is an admin."""
    if role == ROLE_ADMIN:
        return True
    return actor_id is not None and str(actor_id) == str(owner_id)

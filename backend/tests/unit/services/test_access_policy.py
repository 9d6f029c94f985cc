from __future__ import annotations

import uuid

import pytest

from catalog.models.user import ROLE_ADMIN, ROLE_USER
from catalog.services._shared.policies.access import (
    BOOKS_BORROW,
    CATALOG_DELETE,
    CATALOG_READ,
    CATALOG_UPDATE,
    CATALOG_WRITE,
    USERS_MANAGE,
    is_allowed,
    is_owner_or_admin,
    permissions_for,
)


@pytest.mark.parametrize("permission", [CATALOG_READ, BOOKS_BORROW])
def test_users_read_and_borrow(permission):
    assert is_allowed(ROLE_USER, permission)


@pytest.mark.parametrize("permission", [CATALOG_WRITE, CATALOG_UPDATE, CATALOG_DELETE, USERS_MANAGE])
def test_users_cannot_manage(permission):
    assert not is_allowed(ROLE_USER, permission)
    assert is_allowed(ROLE_ADMIN, permission)


def test_unknown_role_has_no_permissions():
    assert permissions_for("librarian") == frozenset()
    assert permissions_for(None) == frozenset()


def test_owner_or_admin():
    owner = uuid.uuid4()
    assert is_owner_or_admin(actor_id=owner, owner_id=str(owner), role=ROLE_USER)
    assert not is_owner_or_admin(actor_id=uuid.uuid4(), owner_id=owner, role=ROLE_USER)
    assert not is_owner_or_admin(actor_id=None, owner_id=None, role=ROLE_USER)
    assert is_owner_or_admin(actor_id=None, owner_id=owner, role=ROLE_ADMIN)

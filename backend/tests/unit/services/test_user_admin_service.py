from __future__ import annotations

import uuid

import pytest

from catalog.models.user import ROLE_ADMIN
from catalog.services._shared.base import ServiceContext
from catalog.services._shared.dto import PaginationIn
from catalog.services._shared.errors import AuthorizationError, NotFoundError
from catalog.services.users import UserAdminService, UserListIn
from tests.factories.user import UserFactory


@pytest.fixture()
def admin_user():
    return UserFactory(role=ROLE_ADMIN)


@pytest.fixture()
def service(admin_user) -> UserAdminService:
    return UserAdminService(ctx=ServiceContext(actor_id=admin_user.id, role=ROLE_ADMIN))


def test_list_filters_by_role(service):
    UserFactory.create_batch(2)
    result = service.list_users(UserListIn(pagination=PaginationIn(), role=ROLE_ADMIN))
    assert result.meta.total == 1
    assert result.items[0].role == ROLE_ADMIN


def test_get_missing(service):
    with pytest.raises(NotFoundError):
        service.get_user(uuid.uuid4())


def test_delete_user(service):
    target = UserFactory()
    target_id = target.id
    service.delete_user(target_id)
    with pytest.raises(NotFoundError):
        service.get_user(target_id)


def test_admin_cannot_delete_self(service, admin_user):
    with pytest.raises(AuthorizationError):
        service.delete_user(admin_user.id)

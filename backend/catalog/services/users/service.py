"""
UserAdminService
================

Administrative read and delete operations over user accounts. Registration
and credentials live in :mod:`catalog.services.auth`.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from catalog.services._shared.base import BaseService
from catalog.services._shared.dto import PageMeta, PaginationIn
from catalog.services._shared.errors import AuthorizationError, NotFoundError
from catalog.services.auth.dto import UserPublicOut
from catalog.services.auth.service import to_public

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UserListIn:
    pagination: PaginationIn
    role: str | None = None


@dataclass(frozen=True, slots=True)
class UserListOut:
    items: list[UserPublicOut]
    meta: PageMeta


class UserAdminService(BaseService):
    """List, fetch and delete users on behalf of an administrator."""

    def list_users(self, dto: UserListIn) -> UserListOut:
        pg = self.ensure_pagination(
            page=dto.pagination.page, limit=dto.pagination.limit, sort=dto.pagination.sort
        )
        with self.ro_uow() as uow:
            page = uow.users.paginate(pg, filters={"role": dto.role})
            items = [to_public(u) for u in page.items]
        return UserListOut(
            items=items, meta=PageMeta.build(page=pg.page, limit=pg.limit, total=page.total)
        )

    def get_user(self, user_id: uuid.UUID) -> UserPublicOut:
        """
        :raises NotFoundError: If the user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return to_public(user)

    def delete_user(self, user_id: uuid.UUID) -> None:
        """
        Delete a user account.

        :raises AuthorizationError: When an administrator targets their own account.
        :raises NotFoundError: If the user does not exist.
        """
        if self.ctx.actor_id is not None and str(self.ctx.actor_id) == str(user_id):
            raise AuthorizationError("Administrators cannot delete their own account.")
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.users.delete(user)
        log.info("users.deleted user_id=%s by=%s", user_id, self.ctx.actor_id)

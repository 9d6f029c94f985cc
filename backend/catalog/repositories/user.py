"""User repository: lookups and refresh-token persistence."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import cast

from sqlalchemy import select, update

from catalog.models.user import User
from catalog.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Refresh-token writes go through single ``UPDATE`` statements that bump
    ``version``; :meth:`swap_refresh_token` additionally predicates the write on
    the previously read token value and version, which makes rotation a
    compare-and-swap.
    """

    model = User

    def _sortable_fields(self):
        return {
            "username": User.username,
            "email": User.email,
            "role": User.role,
            "created_at": User.created_at,
        }

    def _filterable_fields(self):
        return {"role": User.role}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by exact (trimmed) username."""
        stmt = select(User).where(User.username == username.strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username.strip())
        return self.session.execute(stmt).first() is not None

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email.strip().lower())
        return self.session.execute(stmt).first() is not None

    # ---------------------------- Refresh tokens ----------------------------

    def get_by_refresh_token(self, token: str, now: datetime) -> User | None:
        """
        Resolve the owner of an unexpired refresh token.

        :param token: Opaque refresh token presented by the client.
        :param now: Current UTC time; the stored expiry must be strictly later.
        :returns: Matching user or ``None``.
        """
        stmt = (
            select(User)
            .where(User.refresh_token == token, User.refresh_token_expires_at > now)
            .execution_options(populate_existing=True)
        )
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def store_refresh_token(
        self, user_id: uuid.UUID, token: str, expires_at: datetime
    ) -> bool:
        """
        Overwrite the user's refresh token unconditionally.

        :returns: ``True`` if the user row exists.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                refresh_token=token,
                refresh_token_expires_at=expires_at,
                version=User.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        return self._execute_guarded_update(stmt, user_id)

    def swap_refresh_token(
        self,
        *,
        user_id: uuid.UUID,
        expected_token: str,
        expected_version: int,
        new_token: str,
        expires_at: datetime,
        now: datetime,
    ) -> bool:
        """
        Atomically replace ``expected_token`` with ``new_token``.

        The update matches only while the row still carries the token and
        version read by the caller and the token is unexpired, so of several
        concurrent rotations of the same token exactly one succeeds.

        :returns: ``True`` when this call won the swap.
        """
        stmt = (
            update(User)
            .where(
                User.id == user_id,
                User.refresh_token == expected_token,
                User.version == expected_version,
                User.refresh_token_expires_at > now,
            )
            .values(
                refresh_token=new_token,
                refresh_token_expires_at=expires_at,
                version=User.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        return self._execute_guarded_update(stmt, user_id)

    def clear_refresh_token(self, user_id: uuid.UUID) -> bool:
        """Drop the user's refresh token, ending the server-side session."""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=None, refresh_token_expires_at=None, version=User.version + 1)
            .execution_options(synchronize_session=False)
        )
        return self._execute_guarded_update(stmt, user_id)

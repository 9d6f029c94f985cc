from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class TokenSubject:
    """
    Identity embedded into an access token.

    :param user_id: User primary key (``uid`` claim).
    :param username: Token subject (``sub`` claim).
    :param role: Role claim consumed by the authorization gate.
    """

    user_id: uuid.UUID
    username: str
    role: str


@dataclass(frozen=True, slots=True)
class RefreshSession:
    """
    Snapshot of a user row read together with its refresh token.

    ``token`` and ``version`` are the values a later compare-and-swap must
    still find on the row.
    """

    user_id: uuid.UUID
    username: str
    role: str
    token: str
    version: int
    expires_at: datetime

    @property
    def subject(self) -> TokenSubject:
        return TokenSubject(user_id=self.user_id, username=self.username, role=self.role)


@dataclass(frozen=True, slots=True)
class IssuedRefreshToken:
    token: str
    expires_at: datetime

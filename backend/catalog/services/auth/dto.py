# catalog/services/auth/dto.py
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for self-service registration.

    :param username: Desired login name.
    :type username: str
    :param email: Contact address (normalized by the model).
    :type email: str
    :param password: Raw password (hashed before storage).
    :type password: str
    """

    username: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param username: Login name.
    :type username: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    username: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh token taken from the cookie.
    :type refresh_token: str
    """

    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Opaque refresh token.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """Public projection of a user; never carries credentials."""

    id: uuid.UUID
    username: str
    email: str
    role: str
    created_at: datetime | None = None

"""
Explicit success/failure values returned by the session operations.

Expected failures (duplicate username, bad credentials, stale refresh token)
are returned as :class:`Err` instead of raised, and the HTTP layer maps each
:class:`FailureKind` to a status code. Unexpected failures still raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureKind(Enum):
    """Category of an expected failure."""

    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    """
    Expected failure.

    :param kind: Failure category.
    :param message: Client-safe message.
    """

    kind: FailureKind
    message: str

    @property
    def ok(self) -> bool:
        return False


def unauthorized(message: str) -> Err:
    return Err(FailureKind.UNAUTHORIZED, message)


def conflict(message: str) -> Err:
    return Err(FailureKind.CONFLICT, message)

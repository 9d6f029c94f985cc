"""User model: identity, credentials and the current refresh session."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from catalog.core.extensions import db
from catalog.core.security import hash_password, verify_password

from .base import ReprMixin, TimestampMixin, UUIDPKMixin, as_utc

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = frozenset({ROLE_USER, ROLE_ADMIN})


class User(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity.

    Fields
    ------
    username : str
        Unique login name (trimmed).
    email : str
        Unique contact address, stored lowercase.
    password_hash : str
        Salted digest (write-only setter via ``password``).
    role : str
        ``"user"`` or ``"admin"``.
    refresh_token : str | None
        The single refresh credential currently valid for this user.
    refresh_token_expires_at : datetime | None
        Absolute UTC expiry of ``refresh_token``.
    version : int
        Row version bumped on every refresh-token write; rotation is
        predicated on it.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ROLE_USER)
    refresh_token: Mapped[str | None] = mapped_column(String(100), nullable=True)
    refresh_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_refresh_token", "refresh_token"),
    )

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:
        """
        Disallow reading passwords.

        :raises AttributeError: Always; the password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        self.password_hash = hash_password(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :returns: ``True`` if it matches; otherwise ``False``.
        """
        return verify_password(raw, self.password_hash)

    # -------------------- Refresh session --------------------
    @property
    def refresh_expiry_utc(self) -> datetime | None:
        """Refresh expiry as an aware UTC datetime."""
        return as_utc(self.refresh_token_expires_at)

    def has_active_refresh_token(self, token: str, now: datetime) -> bool:
        """Return ``True`` when ``token`` is the stored token and not yet expired."""
        expires = self.refresh_expiry_utc
        return bool(self.refresh_token) and self.refresh_token == token and (
            expires is not None and expires > now
        )

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Username is required.")
        return value.strip()

    @validates("role")
    def _check_role(self, key: str, value: str) -> str:
        if value not in ROLES:
            raise ValueError(f"Unknown role: {value!r}")
        return value

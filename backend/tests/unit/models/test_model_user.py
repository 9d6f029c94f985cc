from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from catalog.models.user import ROLE_USER, User
from tests.factories.user import UserFactory


class TestUserModel:
    def test_defaults_role_and_version(self, session):
        """
        GIVEN a user persisted without role or version
        WHEN  it is reloaded
        THEN  role is ``user`` and version starts at 1
        """
        user = User(username="reader", email="reader@example.com")
        user.password = "Passw0rd!"
        session.add(user)
        session.commit()

        assert user.role == ROLE_USER
        assert user.version == 1
        assert user.refresh_token is None

    def test_email_is_normalized(self, session):
        user = UserFactory(email="  Mixed@Example.COM ")
        assert user.email == "mixed@example.com"

    @pytest.mark.parametrize("email", ["", "no-at-sign", "x@nodot"])
    def test_invalid_email_rejected(self, email):
        with pytest.raises(ValueError):
            User(username="u", email=email)

    def test_blank_username_rejected(self):
        with pytest.raises(ValueError):
            User(username="   ", email="a@example.com")

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError):
            User(username="u", email="a@example.com", role="librarian")

    def test_password_is_write_only(self):
        user = User(username="u", email="a@example.com")
        user.password = "Passw0rd!"
        with pytest.raises(AttributeError):
            _ = user.password
        assert user.verify_password("Passw0rd!")
        assert not user.verify_password("wrong")

    def test_username_unique(self, session):
        UserFactory(username="dup")
        with pytest.raises(IntegrityError):
            UserFactory(username="dup")
        session.rollback()


class TestActiveRefreshToken:
    def test_matching_unexpired_token_is_active(self):
        now = datetime.now(timezone.utc)
        user = User(username="u", email="a@example.com")
        user.refresh_token = "abc"
        user.refresh_token_expires_at = now + timedelta(minutes=1)
        assert user.has_active_refresh_token("abc", now)

    def test_expiry_boundary_is_exclusive(self):
        now = datetime.now(timezone.utc)
        user = User(username="u", email="a@example.com")
        user.refresh_token = "abc"
        user.refresh_token_expires_at = now
        assert not user.has_active_refresh_token("abc", now)

    def test_naive_expiry_is_treated_as_utc(self):
        now = datetime.now(timezone.utc)
        user = User(username="u", email="a@example.com")
        user.refresh_token = "abc"
        user.refresh_token_expires_at = (now + timedelta(hours=1)).replace(tzinfo=None)
        assert user.has_active_refresh_token("abc", now)

    def test_other_token_is_not_active(self):
        now = datetime.now(timezone.utc)
        user = User(username="u", email="a@example.com")
        user.refresh_token = "abc"
        user.refresh_token_expires_at = now + timedelta(days=1)
        assert not user.has_active_refresh_token("abd", now)
        assert not user.has_active_refresh_token("", now)

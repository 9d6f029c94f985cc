from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from freezegun import freeze_time

from catalog.infra.jwt import JWTTokenProvider
from catalog.services._shared.result import FailureKind
from catalog.services.tokens import TokenService, TokenSubject
from catalog.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork
from tests.factories.user import UserFactory


@pytest.fixture()
def tokens() -> TokenService:
    return TokenService(token_provider=JWTTokenProvider(), refresh_ttl=timedelta(days=7))


class TestAccessTokens:
    def test_claims(self, app, tokens):
        """
        GIVEN a subject
        WHEN  an access token is minted
        THEN  it carries the username, uid, role, issuer, audience and a jti
        """
        import uuid

        subject = TokenSubject(user_id=uuid.uuid4(), username="alice", role="user")
        claims = JWTTokenProvider().decode(tokens.issue_access_token(subject))

        assert claims["sub"] == "alice"
        assert claims["uid"] == str(subject.user_id)
        assert claims["role"] == "user"
        assert claims["iss"] == app.config["JWT_ISSUER"]
        assert claims["aud"] == app.config["JWT_AUDIENCE"]
        assert claims["jti"]
        lifetime = claims["exp"] - claims["iat"]
        assert lifetime == app.config["JWT_ACCESS_TOKEN_MINUTES"] * 60

    def test_provider_honours_explicit_lifetime(self, app):
        provider = JWTTokenProvider()
        token = provider.create_access_token(identity="alice", expires_delta=timedelta(minutes=2))
        claims = provider.decode(token)
        assert claims["exp"] - claims["iat"] == 120

    def test_each_token_has_a_unique_jti(self, tokens):
        import uuid

        subject = TokenSubject(user_id=uuid.uuid4(), username="alice", role="user")
        provider = JWTTokenProvider()
        first = provider.decode(tokens.issue_access_token(subject))
        second = provider.decode(tokens.issue_access_token(subject))
        assert first["jti"] != second["jti"]


class TestRefreshTokens:
    def test_new_refresh_tokens_are_random_hex(self):
        first, second = TokenService.new_refresh_token(), TokenService.new_refresh_token()
        assert first != second
        assert len(first) == 32
        int(first, 16)

    def test_issue_then_resolve(self, tokens):
        user = UserFactory(username="alice")
        user_id = user.id

        with SQLAlchemyUnitOfWork() as uow:
            issued = tokens.issue_refresh_token(user_id, uow=uow).value

        result = tokens.resolve_user_by_refresh_token(issued.token)

        assert result.ok
        assert result.value.user_id == user_id
        assert result.value.username == "alice"
        assert result.value.token == issued.token
        assert issued.expires_at - datetime.now(timezone.utc) > timedelta(days=6, hours=23)

    def test_issuing_replaces_previous_token(self, tokens):
        user = UserFactory()
        with SQLAlchemyUnitOfWork() as uow:
            first = tokens.issue_refresh_token(user.id, uow=uow).value
        with SQLAlchemyUnitOfWork() as uow:
            second = tokens.issue_refresh_token(user.id, uow=uow).value

        assert not tokens.resolve_user_by_refresh_token(first.token).ok
        assert tokens.resolve_user_by_refresh_token(second.token).ok

    def test_issue_for_missing_user_stores_nothing(self, tokens):
        import uuid

        with SQLAlchemyUnitOfWork() as uow:
            result = tokens.issue_refresh_token(uuid.uuid4(), uow=uow)

        assert not result.ok
        assert result.kind is FailureKind.UNAUTHORIZED

    @pytest.mark.parametrize("token", ["", "unknown-token"])
    def test_unknown_tokens_are_unauthorized(self, tokens, token):
        result = tokens.resolve_user_by_refresh_token(token)
        assert not result.ok
        assert result.kind is FailureKind.UNAUTHORIZED

    def test_expiry_does_not_slide(self, tokens):
        """
        GIVEN a refresh token issued now
        WHEN  it is resolved just before and just after its lifetime
        THEN  the first lookup succeeds and the second fails
        """
        user = UserFactory()
        start = datetime(2030, 1, 1, tzinfo=timezone.utc)
        with freeze_time(start):
            with SQLAlchemyUnitOfWork() as uow:
                issued = tokens.issue_refresh_token(user.id, uow=uow).value

        with freeze_time(start + timedelta(days=7) - timedelta(seconds=1)):
            assert tokens.resolve_user_by_refresh_token(issued.token).ok
        with freeze_time(start + timedelta(days=7)):
            assert not tokens.resolve_user_by_refresh_token(issued.token).ok
